import os
import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("ANALYTICS_ENABLED", "0")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("AI_ANALYSIS_ENABLED", "0")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

from resume_match.core.analysis_store import MemoryAnalysisStore, SQLiteAnalysisStore  # noqa: E402
from resume_match.core.errors import StorageError  # noqa: E402
from resume_match.schemas.analysis import AnalysisResult  # noqa: E402


def _result(score=70, ai=False):
    return AnalysisResult(
        match_score=score,
        skill_match=80,
        experience_match=75,
        education_match=80,
        keyword_match=12,
        strengths=["Résumé shows relevant background"],
        improvements=[],
        recommendations=["Use keywords", "Quantify achievements"],
        summary="Good match.",
        is_ai_generated=ai,
    )


class _StoreContract:
    def make_store(self):
        raise NotImplementedError

    def test_create_assigns_increasing_ids_and_keeps_inputs(self):
        store = self.make_store()
        first = store.create(_result(60), job_description="jd one", resume_text="resume one")
        second = store.create(_result(90, ai=True), job_description="jd two", resume_text="resume two")

        self.assertEqual(first.id, 1)
        self.assertEqual(second.id, 2)
        self.assertEqual(first.job_description, "jd one")
        self.assertEqual(second.resume_text, "resume two")
        self.assertIsNotNone(first.created_at.tzinfo)

    def test_get_round_trips_all_fields(self):
        store = self.make_store()
        created = store.create(_result(90, ai=True), job_description="jd", resume_text="resume")

        fetched = store.get(created.id)

        self.assertEqual(fetched, created)
        self.assertTrue(fetched.is_ai_generated)
        self.assertEqual(fetched.strengths, ["Résumé shows relevant background"])

    def test_get_unknown_id_returns_none(self):
        store = self.make_store()
        self.assertIsNone(store.get(999))

    def test_list_all_newest_first(self):
        store = self.make_store()
        self.assertEqual(store.list_all(), [])
        for score in (10, 20, 30):
            store.create(_result(score), job_description="jd", resume_text="resume")

        history = store.list_all()

        self.assertEqual([item.id for item in history], [3, 2, 1])
        self.assertEqual([item.match_score for item in history], [30, 20, 10])


class MemoryAnalysisStoreTests(_StoreContract, unittest.TestCase):
    def make_store(self):
        return MemoryAnalysisStore()


class SQLiteAnalysisStoreTests(_StoreContract, unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self._stores = []

    def tearDown(self):
        for store in self._stores:
            store.close()
        self._tmp.cleanup()

    def make_store(self):
        store = SQLiteAnalysisStore(os.path.join(self._tmp.name, "nested", "analyses.db"))
        self._stores.append(store)
        return store

    def test_data_survives_reopen(self):
        db_path = os.path.join(self._tmp.name, "analyses.db")
        store = SQLiteAnalysisStore(db_path)
        created = store.create(_result(55), job_description="jd", resume_text="resume")
        store.close()

        reopened = SQLiteAnalysisStore(db_path)
        self._stores.append(reopened)
        self.assertEqual(reopened.get(created.id), created)

    def test_unusable_path_raises_storage_error(self):
        blocker = os.path.join(self._tmp.name, "blocker")
        with open(blocker, "w", encoding="utf-8") as handle:
            handle.write("not a directory")
        store = SQLiteAnalysisStore(os.path.join(blocker, "sub", "analyses.db"))

        with self.assertRaises(StorageError):
            store.create(_result(), job_description="jd", resume_text="resume")


if __name__ == "__main__":
    unittest.main()
