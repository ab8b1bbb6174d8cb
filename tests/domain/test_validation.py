"""
Tests for the declarative validation records.
"""

import pytest

from locallibrary.domain.validation import (
    BOOK_RULES,
    GENRE_RULES,
    ValidationRule,
    not_empty,
    sanitize,
    validate,
)


def valid_book_form(**overrides):
    form = {
        "title": "The Hobbit",
        "author": "0192f1c4-7a5e-7d2b-9c3a-1f2e3d4c5b6a",
        "summary": "There and back again.",
        "isbn": "9780261102217",
        "price": "8.99",
        "genre": [],
    }
    form.update(overrides)
    return form


class TestSanitize:

    def test_trims_strings(self):
        assert sanitize({"title": "  Dune  "})["title"] == "Dune"

    def test_scalar_genre_becomes_list(self):
        assert sanitize({"genre": "abc"})["genre"] == ["abc"]

    def test_missing_genre_value_becomes_empty_list(self):
        assert sanitize({"genre": None})["genre"] == []

    def test_trims_list_items(self):
        assert sanitize({"genre": [" a ", "b"]})["genre"] == ["a", "b"]

    def test_does_not_mutate_input(self):
        data = {"title": "  Dune  "}
        sanitize(data)
        assert data["title"] == "  Dune  "


class TestValidateBook:

    def test_valid_form_has_no_issues(self):
        assert validate(sanitize(valid_book_form()), BOOK_RULES) == []

    def test_whitespace_only_title_is_empty_after_sanitize(self):
        issues = validate(sanitize(valid_book_form(title="   ")), BOOK_RULES)
        assert [issue.field for issue in issues] == ["title"]
        assert issues[0].message == "Title must not be empty."

    def test_every_failure_is_reported_in_rule_order(self):
        issues = validate(sanitize({}), BOOK_RULES)
        assert [issue.field for issue in issues] == ["title", "author", "summary", "isbn", "price"]

    @pytest.mark.parametrize("price", ["abc", "-1", "NaN"])
    def test_bad_price(self, price):
        issues = validate(sanitize(valid_book_form(price=price)), BOOK_RULES)
        assert [issue.message for issue in issues] == ["Price must be a non-negative number."]


class TestValidateGenre:

    def test_empty_name(self):
        issues = validate(sanitize({"name": " "}), GENRE_RULES)
        assert [issue.message for issue in issues] == ["Genre name required"]

    def test_long_name(self):
        issues = validate({"name": "x" * 101}, GENRE_RULES)
        assert len(issues) == 1
        assert issues[0].field == "name"


def test_custom_rule_records_value():
    rule = ValidationRule("nickname", not_empty, "Nickname required")
    issues = validate({"nickname": ""}, [rule])
    assert issues[0].value == ""
