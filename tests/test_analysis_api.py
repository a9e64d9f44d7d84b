import json
import os
import unittest
from types import SimpleNamespace
from unittest.mock import patch

# Keep API tests deterministic and offline by default.
os.environ.setdefault("LLM_ENABLED", "0")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

from fastapi.testclient import TestClient

from app.api import deps
from app.api.deps import get_ai_client_dep
from app.main import app

SAMPLE = "Mechanical Engineering project using SolidWorks and FEA, ISO 9001 certified, Six Sigma black belt"
RESUME = (
    "Jane Doe\n"
    "Senior Software Engineer - Acme Corp 2019 - Present\n"
    "Python Docker Kubernetes\n"
    "Improved deployment speed by 40%"
)


class FakeClient:
    name = "fake"
    model = "fake-model"

    def __init__(self, reply):
        self.reply = reply

    def complete(self, messages, *, temperature=0.2, max_tokens=1500):
        return self.reply


class AnalysisApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})

    def test_analyze_engineering_rejects_short_text(self):
        response = self.client.post("/v1/analyze-engineering", json={"text": "too short"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Text is too short for meaningful analysis")

    def test_analyze_engineering_basic_contract(self):
        response = self.client.post("/v1/analyze-engineering", json={"text": SAMPLE})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["analysisSource"], "basic")
        self.assertEqual(body["complexity"], "Intermediate")
        self.assertEqual(body["documentType"], "Technical Document")
        self.assertEqual(body["confidence"], 0.6)
        self.assertEqual(body["technicalTerms"], ["solidworks", "fea", "iso"])
        self.assertEqual(body["analysisSummary"]["primaryDiscipline"], "Mechanical Engineering")
        self.assertGreaterEqual(body["engineeringScore"], 0)
        self.assertLessEqual(body["engineeringScore"], 100)

    def test_analyze_engineering_uses_injected_client(self):
        reply = json.dumps({"disciplines": ["Mechanical Engineering"], "keywords": ["FEA"], "complexity": "Expert"})
        app.dependency_overrides[get_ai_client_dep] = lambda: FakeClient(reply)
        body = self.client.post("/v1/analyze-engineering", json={"text": SAMPLE}).json()
        self.assertEqual(body["analysisSource"], "llm_json")
        self.assertEqual(body["complexity"], "Expert")
        self.assertEqual(body["confidence"], 0.8)
        self.assertIn("confidence", body["degradedFields"])

    def test_document_extract_txt(self):
        files = {"file": ("report.txt", SAMPLE.encode("utf-8"), "text/plain")}
        response = self.client.post("/v1/documents/extract", files=files)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["fileName"], "report.txt")
        self.assertEqual(body["fileSize"], len(SAMPLE))
        self.assertEqual(body["pageCount"], 1)
        self.assertTrue(body["extractionMethod"].startswith("utf-8"))
        self.assertIn("Mechanical Engineering", body["engineeringDisciplines"])
        self.assertIn("iso 9001", body["engineeringKeywords"])

    def test_document_extract_rejects_unsupported_format(self):
        files = {"file": ("photo.png", b"\x89PNG\r\n", "image/png")}
        response = self.client.post("/v1/documents/extract", files=files)
        self.assertEqual(response.status_code, 400)

    def test_document_extract_unreadable_pdf(self):
        files = {"file": ("scan.pdf", b"%PDF-1.4\x00\x01\x02", "application/pdf")}
        response = self.client.post("/v1/documents/extract", files=files)
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"], "unreadable or unsupported PDF")

    def test_document_extract_rejects_oversize_upload(self):
        limits = SimpleNamespace(max_upload_bytes=16, max_upload_mb=1)
        with patch.object(deps, "settings", limits):
            files = {"file": ("big.txt", b"x" * 64, "text/plain")}
            response = self.client.post("/v1/documents/extract", files=files)
        self.assertEqual(response.status_code, 413)

    def test_resume_parse(self):
        files = {"file": ("resume.txt", RESUME.encode("utf-8"), "text/plain")}
        response = self.client.post("/v1/resume/parse", files=files, data={"targetRole": "Backend Engineer"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["experience"][0]["company"], "Acme Corp")
        self.assertIn("Python", body["skills"])
        self.assertEqual(body["llmAnalysis"]["analysisSource"], "basic")
        self.assertEqual(body["llmAnalysis"]["overall"]["score"], 60)

    def test_resume_parse_rejects_unsupported_format(self):
        files = {"file": ("resume.rtf", b"{\\rtf1 hello}", "application/rtf")}
        response = self.client.post("/v1/resume/parse", files=files)
        self.assertEqual(response.status_code, 400)

    def test_resume_analyze_with_client(self):
        reply = "```json\n" + json.dumps({"overall": {"strengths": ["Clear"]}}) + "\n```"
        app.dependency_overrides[get_ai_client_dep] = lambda: FakeClient(reply)
        response = self.client.post("/v1/resume/analyze", json={"text": RESUME, "targetRole": "SRE"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["analysisSource"], "llm_fenced")
        self.assertEqual(body["overall"]["score"], 70)
        self.assertEqual(body["overall"]["strengths"], ["Clear"])
        self.assertIn("overall.score", body["degradedFields"])
        self.assertIn("skillGaps", body["gaps"])

    def test_llm_status_without_client(self):
        body = self.client.get("/v1/llm/status").json()
        self.assertEqual(body["connected"], False)
        self.assertIsNone(body["provider"])
        self.assertTrue(body["success"])

    def test_llm_status_with_client(self):
        app.dependency_overrides[get_ai_client_dep] = lambda: FakeClient("Hello")
        body = self.client.get("/v1/llm/status").json()
        self.assertEqual(body, {"success": True, "connected": True, "provider": "fake", "message": "LLM connection successful"})


if __name__ == "__main__":
    unittest.main()
