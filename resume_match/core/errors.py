from __future__ import annotations


class InputValidationError(ValueError):
    """Locally detectable bad input: short texts or an unknown provider."""


class ProviderAttemptFailure(RuntimeError):
    """A remote analysis attempt failed. Always recovered by the fallback analyzer."""

    def __init__(self, message: str, *, code: str = "provider_failed"):
        super().__init__(message)
        self.code = code


class MissingCredentialError(ProviderAttemptFailure):
    def __init__(self, message: str):
        super().__init__(message, code="missing_credential")


class ProviderRequestError(ProviderAttemptFailure):
    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message, code="provider_request_failed")
        self.status_code = status_code


class ResponseFormatError(ProviderAttemptFailure):
    def __init__(self, message: str):
        super().__init__(message, code="invalid_response")


class ExtractionError(ValueError):
    pass


class StorageError(RuntimeError):
    pass
