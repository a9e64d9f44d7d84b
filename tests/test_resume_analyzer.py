import json
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.errors import LLMRequestError, ParseDegradedWarning  # noqa: E402
from app.services.resume_analyzer import (  # noqa: E402
    analyze_resume,
    build_resume_prompt,
    generate_basic_analysis,
    parse_resume_reply,
)

RESUME_TEXT = (
    "Python developer with Docker and Agile. Improved throughput by 30%.\n"
    "Led a team of 5.\n"
    "Strong communication."
)

FULL_REPLY = {
    "skills": {"technical": ["Python", "Docker"], "soft": ["Communication"], "missing": ["Kubernetes"], "recommendations": ["Learn Kubernetes"]},
    "experience": {"summary": "Backend developer", "strengths": ["APIs"], "weaknesses": ["Scope"], "suggestions": ["Quantify"]},
    "education": {"analysis": "CS degree", "relevance": "High", "suggestions": ["Certs"]},
    "achievements": {"identified": ["Improved throughput"], "missed": ["Revenue"], "impact": "Solid"},
    "gaps": {
        "skillGaps": [{"skill": "Kubernetes", "severity": "High", "reason": "Not listed"}],
        "experienceGaps": [{"gap": "Leadership", "severity": "medium", "suggestion": "Lead a project"}],
        "educationGaps": [],
    },
    "overall": {
        "score": 82,
        "strengths": ["Clear"],
        "weaknesses": ["Short"],
        "recommendations": ["Expand"],
        "industryFit": "Good",
        "jobFit": "Good",
    },
}


class FakeClient:
    name = "fake"
    model = "fake-model"

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, messages, *, temperature=0.2, max_tokens=1500):
        self.calls.append({"messages": list(messages), "temperature": temperature, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        return self.reply


class ResumePromptTests(unittest.TestCase):
    def test_prompt_includes_role_and_schema(self):
        messages = build_resume_prompt("Resume body", "Data Engineer", budget=4000)
        self.assertEqual([m.role for m in messages], ["system", "user"])
        self.assertIn("Data Engineer position", messages[1].content)
        self.assertIn('"skillGaps"', messages[1].content)
        self.assertIn("Resume body", messages[1].content)

    def test_prompt_without_role_and_truncated(self):
        messages = build_resume_prompt("x" * 5000, None, budget=100)
        self.assertIn("general career opportunities", messages[1].content)
        self.assertIn("x" * 100, messages[1].content)
        self.assertNotIn("x" * 101, messages[1].content)


class ResumeReplyParsingTests(unittest.TestCase):
    def test_full_reply(self):
        analysis = parse_resume_reply(json.dumps(FULL_REPLY), RESUME_TEXT)
        self.assertEqual(analysis.analysis_source, "llm_json")
        self.assertEqual(analysis.overall.score, 82)
        self.assertEqual(analysis.gaps.skill_gaps[0].severity, "high")
        self.assertEqual(analysis.overall.industry_fit, "Good")
        self.assertEqual(analysis.degraded_fields, [])

    def test_missing_overall_score_defaults_to_seventy(self):
        payload = json.loads(json.dumps(FULL_REPLY))
        del payload["overall"]["score"]
        reply = "Sure, here is the analysis:\n```json\n" + json.dumps(payload) + "\n```"
        with self.assertWarns(ParseDegradedWarning):
            analysis = parse_resume_reply(reply, RESUME_TEXT)
        self.assertEqual(analysis.analysis_source, "llm_fenced")
        self.assertEqual(analysis.overall.score, 70)
        self.assertEqual(analysis.degraded_fields, ["overall.score"])

    def test_out_of_range_score_clamped(self):
        payload = json.loads(json.dumps(FULL_REPLY))
        payload["overall"]["score"] = 150
        self.assertEqual(parse_resume_reply(json.dumps(payload), RESUME_TEXT).overall.score, 100)

    def test_mistyped_sections_degrade_per_field(self):
        reply = json.dumps({"skills": "Python", "overall": {"score": "85", "strengths": ["Clear"]}})
        with self.assertWarns(ParseDegradedWarning):
            analysis = parse_resume_reply(reply, RESUME_TEXT)
        self.assertEqual(analysis.skills.technical, [])
        self.assertEqual(analysis.overall.score, 70)
        self.assertEqual(analysis.overall.strengths, ["Clear"])
        self.assertIn("skills", analysis.degraded_fields)
        self.assertIn("overall.score", analysis.degraded_fields)

    def test_unparseable_reply_uses_basic_analysis(self):
        analysis = parse_resume_reply("I am unable to produce JSON today.", RESUME_TEXT)
        self.assertEqual(analysis.analysis_source, "basic")
        self.assertEqual(analysis.overall.score, 60)


class BasicAnalysisTests(unittest.TestCase):
    def test_basic_analysis_is_deterministic(self):
        analysis = generate_basic_analysis(RESUME_TEXT)
        self.assertEqual(analysis.skills.technical, ["python", "docker"])
        self.assertEqual(analysis.skills.soft, ["agile"])
        self.assertEqual(analysis.skills.missing, ["Leadership", "Problem Solving"])
        self.assertEqual(len(analysis.achievements.identified), 2)
        self.assertEqual(analysis.overall.score, 60)
        self.assertEqual(analysis, generate_basic_analysis(RESUME_TEXT))

    def test_basic_analysis_handles_empty_text(self):
        analysis = generate_basic_analysis("")
        self.assertEqual(analysis.skills.technical, [])
        self.assertEqual(analysis.achievements.identified, [])


class AnalyzeResumeTests(unittest.TestCase):
    def test_llm_reply_used_with_request_settings(self):
        client = FakeClient(reply=json.dumps(FULL_REPLY))
        analysis = analyze_resume(RESUME_TEXT, "Backend Engineer", client)
        self.assertEqual(analysis.overall.score, 82)
        self.assertEqual(len(client.calls), 1)
        self.assertEqual(client.calls[0]["temperature"], 0.3)
        self.assertEqual(client.calls[0]["max_tokens"], 4000)

    def test_request_error_falls_back_without_retry(self):
        client = FakeClient(error=LLMRequestError("timeout"))
        analysis = analyze_resume(RESUME_TEXT, None, client)
        self.assertEqual(analysis.analysis_source, "basic")
        self.assertEqual(len(client.calls), 1)

    def test_missing_client_falls_back(self):
        self.assertEqual(analyze_resume(RESUME_TEXT, None, None).analysis_source, "basic")


if __name__ == "__main__":
    unittest.main()
