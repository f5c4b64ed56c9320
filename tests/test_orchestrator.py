import json
import os
import sys
import unittest
from dataclasses import replace
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("ANALYTICS_ENABLED", "0")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("AI_ANALYSIS_ENABLED", "0")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

from resume_match.ai.types import ProviderConfig, ProviderName  # noqa: E402
from resume_match.core.config import settings  # noqa: E402
from resume_match.core.errors import InputValidationError, ProviderRequestError  # noqa: E402
from resume_match.services.orchestrator import AnalysisOrchestrator  # noqa: E402
from resume_match.services.similarity_analyzer import SimilarityAnalyzer  # noqa: E402

JOB_DESCRIPTION = (
    "Backend engineer with 4+ years of experience in Python, Docker and AWS. "
    "A degree in computer science is preferred."
)
RESUME_TEXT = (
    "Software engineer with 5 years building Python microservices, packaging them with Docker "
    "and deploying to AWS. BSc degree in Computer Science."
)

AI_REPLY = json.dumps(
    {
        "matchScore": 88,
        "skillMatch": 92,
        "experienceMatch": 85,
        "educationMatch": 90,
        "keywordMatch": 120,
        "strengths": ["Python microservices"],
        "improvements": ["Show leadership"],
        "recommendations": ["Add metrics"],
        "summary": "Very good fit.",
    }
)


class _FakeProvider:
    model = "fake-model"

    def __init__(self, name, reply=None, error=None):
        self.name = name
        self.reply = reply
        self.error = error

    def complete(self, *, system_prompt, user_prompt):
        if self.error is not None:
            raise self.error
        return self.reply


class _RecordingFactory:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def __call__(self, name, api_key):
        self.calls.append((name, api_key))
        return _FakeProvider(name, reply=self.reply, error=self.error)


def _settings(**overrides):
    base = {
        "ai_analysis_enabled": False,
        "default_ai_provider": "openrouter",
        "openai_api_key": None,
        "openrouter_api_key": None,
        "anthropic_api_key": None,
        "analytics_enabled": False,
    }
    base.update(overrides)
    return replace(settings, **base)


class AnalysisOrchestratorTests(unittest.TestCase):
    def setUp(self):
        self.expected_fallback = SimilarityAnalyzer().analyze(JOB_DESCRIPTION, RESUME_TEXT)

    def test_preferred_provider_success_returns_ai_result(self):
        factory = _RecordingFactory(reply="Here you go: " + AI_REPLY)
        orchestrator = AnalysisOrchestrator(settings=_settings(), provider_factory=factory)
        config = ProviderConfig(
            preferred_provider=ProviderName.CLAUDE,
            credentials_by_provider={"claude": "sk-ant-test"},
        )

        result = orchestrator.analyze(JOB_DESCRIPTION, RESUME_TEXT, config)

        self.assertTrue(result.is_ai_generated)
        self.assertEqual(result.match_score, 88)
        self.assertEqual(result.keyword_match, 100)
        self.assertEqual(factory.calls, [(ProviderName.CLAUDE, "sk-ant-test")])

    def test_provider_error_falls_back_after_single_attempt(self):
        factory = _RecordingFactory(error=ProviderRequestError("HTTP 500", status_code=500))
        orchestrator = AnalysisOrchestrator(settings=_settings(), provider_factory=factory)
        config = ProviderConfig(
            preferred_provider=ProviderName.OPENAI,
            credentials_by_provider={ProviderName.OPENAI: "sk-test", ProviderName.CLAUDE: "sk-ant"},
        )

        with self.assertLogs("resume_match.services.orchestrator", level="WARNING") as logs:
            result = orchestrator.analyze(JOB_DESCRIPTION, RESUME_TEXT, config)

        self.assertEqual(result, self.expected_fallback)
        self.assertFalse(result.is_ai_generated)
        self.assertEqual(len(factory.calls), 1)
        self.assertTrue(any("provider_request_failed" in line for line in logs.output))

    def test_malformed_reply_falls_back(self):
        factory = _RecordingFactory(reply="Sorry, I cannot produce JSON today.")
        orchestrator = AnalysisOrchestrator(settings=_settings(), provider_factory=factory)
        config = ProviderConfig(
            preferred_provider=ProviderName.OPENROUTER,
            credentials_by_provider={ProviderName.OPENROUTER: "or-key"},
        )

        result = orchestrator.analyze(JOB_DESCRIPTION, RESUME_TEXT, config)

        self.assertEqual(result, self.expected_fallback)

    def test_unexpected_exception_falls_back(self):
        factory = _RecordingFactory(error=KeyError("choices"))
        orchestrator = AnalysisOrchestrator(settings=_settings(), provider_factory=factory)
        config = ProviderConfig(
            preferred_provider=ProviderName.OPENAI,
            credentials_by_provider={ProviderName.OPENAI: "sk-test"},
        )

        self.assertEqual(orchestrator.analyze(JOB_DESCRIPTION, RESUME_TEXT, config), self.expected_fallback)

    def test_missing_credential_skips_provider(self):
        factory = _RecordingFactory(reply=AI_REPLY)
        orchestrator = AnalysisOrchestrator(settings=_settings(), provider_factory=factory)
        config = ProviderConfig(
            preferred_provider=ProviderName.CLAUDE,
            credentials_by_provider={ProviderName.OPENAI: "sk-test", ProviderName.CLAUDE: "   "},
        )

        result = orchestrator.analyze(JOB_DESCRIPTION, RESUME_TEXT, config)

        self.assertEqual(result, self.expected_fallback)
        self.assertEqual(factory.calls, [])

    def test_unknown_provider_is_rejected(self):
        with self.assertRaises(InputValidationError):
            ProviderConfig(preferred_provider="gemini", credentials_by_provider={})
        with self.assertRaises(InputValidationError):
            ProviderConfig(preferred_provider="openai", credentials_by_provider={"gemini": "x"})

    def test_non_config_object_is_rejected(self):
        orchestrator = AnalysisOrchestrator(settings=_settings(), provider_factory=_RecordingFactory())
        with self.assertRaises(InputValidationError):
            orchestrator.analyze(JOB_DESCRIPTION, RESUME_TEXT, {"preferredProvider": "openai"})

    def test_short_inputs_are_rejected(self):
        factory = _RecordingFactory(reply=AI_REPLY)
        orchestrator = AnalysisOrchestrator(settings=_settings(), provider_factory=factory)
        with self.assertRaises(InputValidationError):
            orchestrator.analyze("too short", RESUME_TEXT)
        with self.assertRaises(InputValidationError):
            orchestrator.analyze(JOB_DESCRIPTION, "too short")
        self.assertEqual(factory.calls, [])

    def test_default_provider_used_without_config(self):
        factory = _RecordingFactory(reply=AI_REPLY)
        orchestrator = AnalysisOrchestrator(
            settings=_settings(ai_analysis_enabled=True, openrouter_api_key="or-default"),
            provider_factory=factory,
        )

        result = orchestrator.analyze(JOB_DESCRIPTION, RESUME_TEXT)

        self.assertTrue(result.is_ai_generated)
        self.assertEqual(factory.calls, [(ProviderName.OPENROUTER, "or-default")])

    def test_default_provider_without_credential_falls_back(self):
        factory = _RecordingFactory(reply=AI_REPLY)
        orchestrator = AnalysisOrchestrator(
            settings=_settings(ai_analysis_enabled=True, default_ai_provider="openai"),
            provider_factory=factory,
        )

        self.assertEqual(orchestrator.analyze(JOB_DESCRIPTION, RESUME_TEXT), self.expected_fallback)
        self.assertEqual(factory.calls, [])

    def test_disabled_default_attempt_goes_straight_to_fallback(self):
        factory = _RecordingFactory(reply=AI_REPLY)
        orchestrator = AnalysisOrchestrator(
            settings=_settings(ai_analysis_enabled=False, openrouter_api_key="or-default"),
            provider_factory=factory,
        )

        self.assertEqual(orchestrator.analyze(JOB_DESCRIPTION, RESUME_TEXT), self.expected_fallback)
        self.assertEqual(factory.calls, [])


if __name__ == "__main__":
    unittest.main()
