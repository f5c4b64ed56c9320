import os
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("ANALYTICS_ENABLED", "0")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("AI_ANALYSIS_ENABLED", "0")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

import resume_match.main  # noqa: F401,E402
from resume_match.core.scoring import get_scoring_value  # noqa: E402


class PipelineSmokeTests(unittest.TestCase):
    def test_safe_imports_and_scoring_config_lookup(self):
        self.assertEqual(get_scoring_value("similarity.weights.experience"), 0.30)

    def test_all_routes_mounted_under_api_prefix(self):
        paths = set(resume_match.main.app.openapi()["paths"])
        for path in (
            "/api/match",
            "/api/analysis/{analysis_id}",
            "/api/history",
            "/api/extract-pdf",
            "/api/health",
            "/api/analytics/provider-runs",
        ):
            self.assertIn(path, paths)


if __name__ == "__main__":
    unittest.main()
