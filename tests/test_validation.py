"""
Unit tests for the rule engine and the bird rule set.
"""
import pytest

from aviary.core.validation import (
    Rule,
    ValidationErrors,
    at_least,
    at_most,
    humanize,
    is_blank,
    max_length,
    present,
    to_integer,
    validate,
)
from aviary.models.bird import Bird
from aviary.services.birds import BIRD_RULES, permit


class TestValidationErrors:
    def test_empty_is_falsy(self):
        assert not ValidationErrors()

    def test_keeps_insertion_order(self):
        errors = ValidationErrors()
        errors.add("species", "must be a string")
        errors.add("name", "can't be blank")
        errors.add("name", "must be a string")
        assert errors.attributes == ["species", "name"]
        assert errors["name"] == ["can't be blank", "must be a string"]
        assert errors.full_messages == [
            "Species must be a string",
            "Name can't be blank",
            "Name must be a string",
        ]

    def test_messages_is_a_copy(self):
        errors = ValidationErrors()
        errors.add("name", "can't be blank")
        errors.messages["name"].append("tampered")
        assert errors["name"] == ["can't be blank"]

    def test_missing_attribute(self):
        errors = ValidationErrors()
        assert "name" not in errors
        assert errors["name"] == []


@pytest.mark.parametrize("attribute, expected", [
    ("name", "Name"),
    ("created_at", "Created at"),
    ("owner_id", "Owner"),
])
def test_humanize(attribute, expected):
    assert humanize(attribute) == expected


@pytest.mark.parametrize("value, blank", [
    (None, True),
    ("", True),
    ("  \t", True),
    ("Ruby", False),
    (0, False),
])
def test_is_blank(value, blank):
    assert is_blank(value) is blank


class TestToInteger:
    @pytest.mark.parametrize("value, expected", [(3, 3), ("12", 12), (" 5 ", 5), (2.0, 2)])
    def test_accepts(self, value, expected):
        assert to_integer(value) == expected

    @pytest.mark.parametrize("value", [True, None, "", "lots", "1.5", 1.5, [1]])
    def test_rejects(self, value):
        with pytest.raises(ValueError):
            to_integer(value)


def test_validate_runs_every_rule():
    calls = []

    def failing(name):
        def check(attrs, ctx):
            calls.append(name)
            return False
        return check

    rules = [
        Rule("a", "name", "first", failing("a")),
        Rule("b", "name", "second", failing("b")),
        Rule("c", "likes", "third", failing("c")),
    ]
    errors = validate(rules, {})
    assert calls == ["a", "b", "c"]
    assert errors.messages == {"name": ["first", "second"], "likes": ["third"]}


def test_present_check():
    check = present("name")
    assert check({"name": "Ruby"}, {})
    assert not check({}, {})


class TestBirdRules:
    def run(self, db, attrs, record=None):
        return validate(BIRD_RULES, attrs, {"db": db, "record": record})

    def test_valid(self, db):
        assert not self.run(db, {"name": "Ruby", "species": None, "likes": 0})

    def test_name_not_string(self, db):
        errors = self.run(db, {"name": 42, "species": None, "likes": 0})
        assert errors.messages == {"name": ["must be a string"]}

    def test_name_unique_excludes_record(self, db):
        bird = Bird(name="Ruby", likes=0)
        db.add(bird)
        db.commit()
        attrs = {"name": "Ruby", "species": None, "likes": 0}
        assert self.run(db, attrs).messages == {"name": ["has already been taken"]}
        assert not self.run(db, attrs, record=bird)

    def test_null_likes(self, db):
        errors = self.run(db, {"name": "Ruby", "species": None, "likes": None})
        assert errors.messages == {"likes": ["is not a number"]}


def test_permit_drops_unknown_keys():
    assert permit({"name": "Ruby", "likes": 1, "id": 9, "admin": True}) == {
        "name": "Ruby",
        "likes": 1,
    }


class TestLimitChecks:
    def test_max_length(self):
        check = max_length("name", 3)
        assert check({"name": "abc"}, {})
        assert not check({"name": "abcd"}, {})
        # non-text values belong to the type rule
        assert check({"name": 12345}, {})
        assert check({}, {})

    def test_at_most(self):
        check = at_most("likes", 10)
        assert check({"likes": 10}, {})
        assert check({"likes": "9"}, {})
        assert not check({"likes": "11"}, {})
        # not a number: reported by the integer rule only
        assert check({"likes": "lots"}, {})

    def test_at_least(self):
        check = at_least("likes", 0)
        assert check({"likes": 0}, {})
        assert not check({"likes": -1}, {})
        assert check({"likes": None}, {})


def test_bird_rules_report_overflow_and_length_together(db):
    attrs = {"name": "n" * 300, "species": "s" * 300, "likes": 2**63}
    errors = validate(BIRD_RULES, attrs, {"db": db, "record": None})
    assert errors.messages == {
        "name": ["is too long (maximum is 256 characters)"],
        "species": ["is too long (maximum is 256 characters)"],
        "likes": ["must be less than or equal to 2147483647"],
    }
