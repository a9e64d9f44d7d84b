import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.errors import ParseDegradedWarning  # noqa: E402
from app.schemas.resume import SkillGap  # noqa: E402
from app.services.llm_parsing import (  # noqa: E402
    FieldReader,
    cleanup_json,
    extract_json_payload,
    report_degraded,
    truncate_for_prompt,
)


class ExtractJsonPayloadTests(unittest.TestCase):
    def test_whole_reply_object(self):
        self.assertEqual(extract_json_payload('  {"a": 1}\n'), ({"a": 1}, "llm_json"))

    def test_fenced_block(self):
        reply = 'Here you go:\n```json\n{"a": 1}\n```\nThanks'
        self.assertEqual(extract_json_payload(reply), ({"a": 1}, "llm_fenced"))

    def test_bare_fence(self):
        self.assertEqual(extract_json_payload('```\n{"a": 2}\n```'), ({"a": 2}, "llm_fenced"))

    def test_greedy_braces_with_cleanup(self):
        reply = 'Analysis: {"a": 1, "b": [1, 2,],} end'
        self.assertEqual(extract_json_payload(reply), ({"a": 1, "b": [1, 2]}, "llm_braces"))

    def test_escaped_quotes_unescaped(self):
        reply = 'Result: {\\"a\\": \\"x\\"}'
        self.assertEqual(extract_json_payload(reply), ({"a": "x"}, "llm_braces"))

    def test_no_json_returns_none(self):
        self.assertIsNone(extract_json_payload("I cannot help with that."))
        self.assertIsNone(extract_json_payload(""))
        self.assertIsNone(extract_json_payload("[1, 2, 3]"))

    def test_cleanup_json(self):
        self.assertEqual(cleanup_json('{\n\t"a": [1,\n 2,],\n}'), '{ "a": [1, 2]}')


class FieldReaderTests(unittest.TestCase):
    def test_fields_defaulted_independently(self):
        reader = FieldReader({"name": "  Ada ", "tags": "oops", "score": True, "nested": [1]})
        self.assertEqual(reader.string("name", "x"), "Ada")
        self.assertEqual(reader.string_list("tags"), [])
        self.assertEqual(reader.number("score", 70.0), 70.0)
        self.assertEqual(reader.child("nested").string("inner", "d"), "d")
        self.assertEqual(reader.string("missing", "fallback"), "fallback")
        self.assertEqual(
            reader.degraded_fields(),
            ["missing", "nested", "nested.inner", "score", "tags"],
        )

    def test_model_list_drops_invalid_items(self):
        reader = FieldReader(
            {"gaps": [{"skill": "Docker", "severity": "HIGH", "reason": "absent"}, {"severity": "urgent"}]}
        )
        gaps = reader.model_list("gaps", SkillGap)
        self.assertEqual(len(gaps), 1)
        self.assertEqual(gaps[0].severity, "high")
        self.assertEqual(reader.degraded_fields(), ["gaps[1]"])

    def test_report_degraded_warns_only_when_needed(self):
        reader = FieldReader({"a": "ok"})
        reader.string("a", "")
        self.assertEqual(report_degraded("test", reader), [])

        reader.string("b", "")
        with self.assertWarns(ParseDegradedWarning):
            self.assertEqual(report_degraded("test", reader), ["b"])


class TruncateTests(unittest.TestCase):
    def test_truncate(self):
        self.assertEqual(truncate_for_prompt("abcdef", 4), "abcd")
        self.assertEqual(truncate_for_prompt("abc", 4), "abc")
        self.assertEqual(truncate_for_prompt("abc", 0), "abc")


if __name__ == "__main__":
    unittest.main()
