"""Tests for query compilation and evaluation."""

from __future__ import annotations

import json
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from JsonlViewer.core.evaluate import evaluate, match_wildcard, value_text
from JsonlViewer.core.models import Record
from JsonlViewer.core.query import And, FieldTerm, Not, Or, Phrase, Term, Wildcard, compile_query


def _record(content: dict, line_number: int = 1) -> Record:
    return Record(line_number=line_number, content=content, raw_text=json.dumps(content))


def _matches(query: str, content: dict, case_sensitive: bool = False) -> bool:
    return evaluate(compile_query(query), _record(content), case_sensitive)


class TestCompileQuery(unittest.TestCase):
    def test_empty_query_compiles_to_none(self) -> None:
        self.assertIsNone(compile_query(""))
        self.assertIsNone(compile_query("   "))

    def test_field_terms_joined_by_and(self) -> None:
        self.assertEqual(
            compile_query("name:John AND age:30"),
            And(FieldTerm("name", "John"), FieldTerm("age", "30")),
        )

    def test_or_is_left_associative(self) -> None:
        self.assertEqual(
            compile_query("a OR b OR c"),
            Or(Or(Term("a"), Term("b")), Term("c")),
        )

    def test_or_binds_loosest(self) -> None:
        self.assertEqual(
            compile_query("a AND b OR c"),
            Or(And(Term("a"), Term("b")), Term("c")),
        )
        self.assertEqual(
            compile_query("a OR b AND c"),
            Or(Term("a"), And(Term("b"), Term("c"))),
        )

    def test_not_prefix(self) -> None:
        self.assertEqual(compile_query("NOT status:unemployed"), Not(FieldTerm("status", "unemployed")))
        self.assertEqual(compile_query("NOT NOT x"), Not(Not(Term("x"))))

    def test_not_inside_and(self) -> None:
        self.assertEqual(
            compile_query("name:John AND NOT age:30"),
            And(FieldTerm("name", "John"), Not(FieldTerm("age", "30"))),
        )

    def test_phrases(self) -> None:
        self.assertEqual(compile_query('"John Doe"'), Phrase("John Doe"))
        self.assertEqual(compile_query('name:"John Doe"'), Phrase("John Doe", "name"))

    def test_wildcards(self) -> None:
        self.assertEqual(compile_query("email:*.com"), Wildcard("*.com", "email"))
        self.assertEqual(compile_query("te?t"), Wildcard("te?t"))

    def test_field_split_on_first_colon(self) -> None:
        self.assertEqual(compile_query("url:http://x"), FieldTerm("url", "http://x"))

    def test_whitespace_around_field_and_value_is_trimmed(self) -> None:
        self.assertEqual(compile_query("  name : John  "), FieldTerm("name", "John"))

    def test_lowercase_operators_are_plain_text(self) -> None:
        self.assertEqual(compile_query("a and b"), Term("a and b"))
        self.assertEqual(compile_query("not x"), Term("not x"))

    def test_operator_inside_phrase_still_splits(self) -> None:
        node = compile_query('title:"war AND peace"')
        self.assertIsInstance(node, And)

    def test_dangling_operator_yields_none_operand(self) -> None:
        self.assertEqual(compile_query("a AND    AND b"), And(And(Term("a"), None), Term("b")))


class TestEvaluate(unittest.TestCase):
    def test_and_of_field_terms(self) -> None:
        self.assertTrue(_matches("name:John AND age:30", {"name": "John Doe", "age": 30}))
        self.assertFalse(_matches("name:John AND age:30", {"name": "John Doe", "age": 25}))

    def test_or_of_terms(self) -> None:
        query = "John OR Jane"
        self.assertTrue(_matches(query, {"name": "John"}))
        self.assertTrue(_matches(query, {"name": "Jane"}))
        self.assertFalse(_matches(query, {"name": "Bob"}))

    def test_not(self) -> None:
        self.assertTrue(_matches("NOT status:unemployed", {"status": "employed"}))
        self.assertFalse(_matches("NOT status:unemployed", {"status": "unemployed"}))

    def test_missing_field_never_matches(self) -> None:
        self.assertFalse(_matches("city:Paris", {"name": "John"}))
        self.assertTrue(_matches("NOT city:Paris", {"name": "John"}))

    def test_null_field_never_matches(self) -> None:
        self.assertFalse(_matches("city:null", {"city": None}))
        self.assertFalse(_matches('city:"null"', {"city": None}))
        self.assertFalse(_matches("city:*", {"city": None}))

    def test_field_term_is_substring(self) -> None:
        self.assertTrue(_matches("name:oh", {"name": "John"}))

    def test_empty_field_value_matches_any_present_value(self) -> None:
        self.assertTrue(_matches("name:", {"name": ""}))
        self.assertTrue(_matches("name:", {"name": "John"}))

    def test_term_searches_the_raw_line(self) -> None:
        self.assertTrue(_matches("age", {"age": 30}))

    def test_non_string_values_use_json_spelling(self) -> None:
        self.assertTrue(_matches("active:true", {"active": True}))
        self.assertFalse(_matches("active:True", {"active": True}, case_sensitive=True))
        self.assertTrue(_matches("score:1.5", {"score": 1.5}))
        self.assertTrue(_matches("tags:b", {"tags": ["a", "b"]}))
        self.assertTrue(_matches('meta:"k":1', {"meta": {"k": 1}}))

    def test_case_sensitivity_applies_to_values(self) -> None:
        self.assertTrue(_matches("name:john", {"name": "John"}))
        self.assertFalse(_matches("name:john", {"name": "John"}, case_sensitive=True))
        self.assertTrue(_matches("name:John", {"name": "John"}, case_sensitive=True))

    def test_phrase_is_plain_containment(self) -> None:
        self.assertTrue(_matches('name:"John Doe"', {"name": "Mr John Doex"}))
        self.assertFalse(_matches('name:"John Doe"', {"name": "John Smith"}))
        self.assertTrue(_matches('"John Doe"', {"name": "John Doe"}))

    def test_wildcard_suffix_on_field(self) -> None:
        self.assertTrue(_matches("email:*.com", {"email": "a@b.com"}))
        self.assertFalse(_matches("email:*.com", {"email": "a@b.org"}))

    def test_question_mark_is_literal(self) -> None:
        self.assertFalse(_matches("name:J?hn", {"name": "John"}))
        self.assertTrue(_matches("name:J?hn", {"name": "J?hn"}))

    def test_none_node_never_matches(self) -> None:
        self.assertFalse(evaluate(None, _record({"a": 1})))

    def test_unknown_node_type_raises(self) -> None:
        with self.assertRaises(TypeError):
            evaluate("name:John", _record({"name": "John"}))  # type: ignore[arg-type]


class TestMatchWildcard(unittest.TestCase):
    def test_shapes(self) -> None:
        cases = [
            ("John", "Jo*", True),
            ("John", "*hn", True),
            ("John", "*oh*", True),
            ("John", "J*n", False),
            ("xJnx", "J*n", True),
            ("John", "*", True),
            ("", "*", False),
            ("John", "Ja*", False),
        ]
        for text, pattern, expected in cases:
            with self.subTest(text=text, pattern=pattern):
                self.assertEqual(match_wildcard(text, pattern, case_sensitive=True), expected)

    def test_case_folding(self) -> None:
        self.assertTrue(match_wildcard("JOHN", "jo*", case_sensitive=False))
        self.assertFalse(match_wildcard("JOHN", "jo*", case_sensitive=True))


class TestValueText(unittest.TestCase):
    def test_spellings(self) -> None:
        self.assertEqual(value_text("x"), "x")
        self.assertEqual(value_text(None), "null")
        self.assertEqual(value_text(False), "false")
        self.assertEqual(value_text(30), "30")
        self.assertEqual(value_text([1, "é"]), '[1,"é"]')


if __name__ == "__main__":
    unittest.main()
