"""
Declarative validation records for form submissions.

Each operation owns a named list of rules. All rules are evaluated up front
and every failure is reported, so a form can show all of its errors at once.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Mapping, Sequence


@dataclass(frozen=True)
class ValidationRule:
    field: str
    check: Callable[[Any], bool]
    message: str


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    message: str
    value: Any = None


def not_empty(value: Any) -> bool:
    return isinstance(value, str) and len(value) >= 1


def is_non_negative_decimal(value: Any) -> bool:
    if not not_empty(value):
        # reported by the not-empty rule
        return True
    try:
        amount = Decimal(value)
    except InvalidOperation:
        return False
    return amount.is_finite() and amount >= 0


def max_length(limit: int) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        return not isinstance(value, str) or len(value) <= limit

    return check


BOOK_RULES: Sequence[ValidationRule] = (
    ValidationRule("title", not_empty, "Title must not be empty."),
    ValidationRule("author", not_empty, "Author must not be empty."),
    ValidationRule("summary", not_empty, "Summary must not be empty."),
    ValidationRule("isbn", not_empty, "ISBN must not be empty"),
    ValidationRule("price", not_empty, "Price must not be empty."),
    ValidationRule("price", is_non_negative_decimal, "Price must be a non-negative number."),
)

GENRE_RULES: Sequence[ValidationRule] = (
    ValidationRule("name", not_empty, "Genre name required"),
    ValidationRule("name", max_length(100), "Genre name must be at most 100 characters."),
)


def sanitize(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Trim every string field and normalize a scalar genre into a list.

    A single checkbox value arrives as a plain string, none as a missing key.
    """
    cleaned: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            cleaned[key] = value.strip()
        elif isinstance(value, (list, tuple)):
            cleaned[key] = [item.strip() if isinstance(item, str) else item for item in value]
        else:
            cleaned[key] = value

    if "genre" in cleaned:
        genre = cleaned["genre"]
        if genre is None:
            cleaned["genre"] = []
        elif not isinstance(genre, list):
            cleaned["genre"] = [genre]

    return cleaned


def validate(data: Mapping[str, Any], rules: Sequence[ValidationRule]) -> List[ValidationIssue]:
    """Evaluate every rule against sanitized data; return failures in rule order."""
    issues: List[ValidationIssue] = []
    for rule in rules:
        value = data.get(rule.field)
        if not rule.check(value):
            issues.append(ValidationIssue(field=rule.field, message=rule.message, value=value))
    return issues
