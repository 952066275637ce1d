"""
Declarative validation rules.

A rule is an (attribute, message, check) triple. `validate` runs every
rule in declaration order against a candidate attribute mapping and
collects all failures; it never stops at the first one.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional


def humanize(attribute: str) -> str:
    """`created_at` → `Created at`, `owner_id` → `Owner`."""
    text = attribute[:-3] if attribute.endswith("_id") else attribute
    text = text.replace("_", " ").strip()
    return text[:1].upper() + text[1:]


class ValidationErrors:
    """Attribute → ordered messages, in the order failures were added."""

    def __init__(self) -> None:
        self._messages: dict[str, list[str]] = {}

    def add(self, attribute: str, message: str) -> None:
        self._messages.setdefault(attribute, []).append(message)

    def __bool__(self) -> bool:
        return bool(self._messages)

    def __contains__(self, attribute: object) -> bool:
        return attribute in self._messages

    def __getitem__(self, attribute: str) -> list[str]:
        return list(self._messages.get(attribute, []))

    def __repr__(self) -> str:
        return f"ValidationErrors({self._messages!r})"

    @property
    def attributes(self) -> list[str]:
        return list(self._messages)

    @property
    def messages(self) -> dict[str, list[str]]:
        return {attr: list(msgs) for attr, msgs in self._messages.items()}

    @property
    def full_messages(self) -> list[str]:
        return [
            f"{humanize(attr)} {msg}"
            for attr, msgs in self._messages.items()
            for msg in msgs
        ]


# check(attrs, context) → True when the rule holds
Check = Callable[[Mapping[str, Any], Mapping[str, Any]], bool]


@dataclass(frozen=True)
class Rule:
    name: str
    attribute: str
    message: str
    check: Check


def validate(
    rules: list[Rule],
    attrs: Mapping[str, Any],
    context: Optional[Mapping[str, Any]] = None,
) -> ValidationErrors:
    errors = ValidationErrors()
    ctx = context or {}
    for rule in rules:
        if not rule.check(attrs, ctx):
            errors.add(rule.attribute, rule.message)
    return errors


# ---------------------------------------------------------------------------
# Reusable checks
# ---------------------------------------------------------------------------

def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def to_integer(value: Any) -> int:
    """Coerce ints and integer literals; raise ValueError for anything else."""
    if isinstance(value, bool):
        raise ValueError(f"not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise ValueError(f"not an integer: {value!r}")


def present(attribute: str) -> Check:
    return lambda attrs, ctx: not is_blank(attrs.get(attribute))


def string_or_null(attribute: str) -> Check:
    def check(attrs: Mapping[str, Any], ctx: Mapping[str, Any]) -> bool:
        value = attrs.get(attribute)
        return value is None or isinstance(value, str)
    return check


def integer(attribute: str) -> Check:
    def check(attrs: Mapping[str, Any], ctx: Mapping[str, Any]) -> bool:
        try:
            to_integer(attrs.get(attribute))
        except ValueError:
            return False
        return True
    return check


def max_length(attribute: str, maximum: int) -> Check:
    """Text no longer than `maximum`; non-text values are left to other rules."""
    def check(attrs: Mapping[str, Any], ctx: Mapping[str, Any]) -> bool:
        value = attrs.get(attribute)
        return not isinstance(value, str) or len(value) <= maximum
    return check


def at_most(attribute: str, maximum: int) -> Check:
    def check(attrs: Mapping[str, Any], ctx: Mapping[str, Any]) -> bool:
        try:
            return to_integer(attrs.get(attribute)) <= maximum
        except ValueError:
            return True
    return check


def at_least(attribute: str, minimum: int) -> Check:
    def check(attrs: Mapping[str, Any], ctx: Mapping[str, Any]) -> bool:
        try:
            return to_integer(attrs.get(attribute)) >= minimum
        except ValueError:
            return True
    return check
