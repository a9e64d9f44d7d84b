import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.features.term_extractor import (  # noqa: E402
    TermBucket,
    dedupe_terms,
    extract_terms,
    fallback_terms,
    find_technical_words,
    is_technical_word,
)

SAMPLE = "Mechanical Engineering project using SolidWorks and FEA, ISO 9001 certified, Six Sigma black belt"


class TermExtractorTests(unittest.TestCase):
    def test_category_buckets(self):
        bucket = extract_terms(SAMPLE)
        self.assertEqual(bucket.disciplines, frozenset({"mechanical engineering"}))
        self.assertEqual(bucket.technologies, frozenset({"solidworks", "six sigma"}))
        self.assertEqual(bucket.standards, frozenset({"iso", "iso 9001"}))
        self.assertEqual(bucket.methodologies, frozenset({"fea"}))

    def test_iso_and_six_sigma_appear_once_in_keywords(self):
        keywords = extract_terms(SAMPLE).keywords()
        self.assertEqual(keywords.count("iso 9001"), 1)
        self.assertEqual(keywords.count("six sigma"), 1)
        self.assertEqual(keywords.count("iso"), 1)

    def test_extraction_is_idempotent(self):
        self.assertEqual(extract_terms(SAMPLE), extract_terms(SAMPLE))

    def test_symbol_terms_match_whole_tokens(self):
        bucket = extract_terms("Experience with C++, Node.js, JavaScript and CI/CD pipelines")
        self.assertIn("c++", bucket.technologies)
        self.assertIn("node.js", bucket.technologies)
        self.assertIn("javascript", bucket.technologies)
        self.assertIn("ci/cd", bucket.technologies)
        self.assertNotIn("java", bucket.technologies)

    def test_discipline_titles(self):
        bucket = extract_terms("Civil engineering and software   engineering teams")
        self.assertEqual(bucket.discipline_titles(), ["Civil Engineering", "Software Engineering"])

    def test_technical_words_filtered_and_deduplicated(self):
        words = find_technical_words("Optimization, optimization! 42kg of the algorithm at 5 Watt")
        self.assertEqual(words, ("optimization", "algorithm", "watt"))
        self.assertTrue(is_technical_word("microcontroller"))
        self.assertFalse(is_technical_word("cat"))

    def test_keywords_truncate_technical_words(self):
        bucket = TermBucket(technologies=frozenset({"python"}), technical_words=("alpha", "beta", "gamma"))
        self.assertEqual(bucket.keywords(technical_word_limit=2), ["python", "alpha", "beta"])

    def test_dedupe_is_case_insensitive_and_keeps_first_spelling(self):
        self.assertEqual(dedupe_terms(["FEA", "fea", "SolidWorks", "ME"], min_length=3), ["FEA", "SolidWorks"])

    def test_fallback_scan(self):
        disciplines, keywords = fallback_terms(SAMPLE)
        self.assertEqual(disciplines, ["Mechanical Engineering"])
        self.assertEqual(keywords, ["solidworks", "fea", "iso"])


if __name__ == "__main__":
    unittest.main()
