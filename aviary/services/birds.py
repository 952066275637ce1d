"""
Bird service: lookup, listing and validated writes.

Public API
----------
permit(params)                 → dict           (allow-list filter)
list_birds(db)                 → list[Bird]
find_bird(db, bird_id)         → Found | NotFound
create_bird(db, params)        → Committed | Rejected
update_bird(db, bird, params)  → Committed | Rejected
destroy_bird(db, bird)         → Destroyed

Writes are all-or-nothing: every rule in BIRD_RULES is evaluated against
the candidate state before the session is touched, and a write that
fails any of them commits nothing.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from aviary.core.outcomes import (
    Committed,
    Destroyed,
    Found,
    LookupResult,
    NotFound,
    Rejected,
    WriteResult,
)
from aviary.core.validation import (
    Rule,
    ValidationErrors,
    at_least,
    at_most,
    integer,
    is_blank,
    max_length,
    present,
    string_or_null,
    to_integer,
    validate,
)
from aviary.models.bird import Bird

log = structlog.get_logger(__name__)

PERMITTED_FIELDS: frozenset[str] = frozenset({"name", "species", "likes"})

# birds.id and birds.likes are 32-bit INTEGER columns
MAX_ID = 2**31 - 1
MIN_INT = -(2**31)
MAX_INT = 2**31 - 1

# birds.name and birds.species are String(256)
MAX_TEXT = 256

MSG_BLANK = "can't be blank"
MSG_NOT_STRING = "must be a string"
MSG_TAKEN = "has already been taken"
MSG_NOT_NUMBER = "is not a number"
MSG_TOO_LONG = f"is too long (maximum is {MAX_TEXT} characters)"
MSG_TOO_BIG = f"must be less than or equal to {MAX_INT}"
MSG_TOO_SMALL = f"must be greater than or equal to {MIN_INT}"


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def _name_unique(attrs: Mapping[str, Any], ctx: Mapping[str, Any]) -> bool:
    name = attrs.get("name")
    if not isinstance(name, str) or is_blank(name):
        return True
    db: Session = ctx["db"]
    record: Optional[Bird] = ctx.get("record")
    query = db.query(Bird.id).filter(Bird.name == name)
    if record is not None:
        query = query.filter(Bird.id != record.id)
    return query.first() is None


BIRD_RULES: list[Rule] = [
    Rule("name_present", "name", MSG_BLANK, present("name")),
    Rule("name_string", "name", MSG_NOT_STRING, string_or_null("name")),
    Rule("name_length", "name", MSG_TOO_LONG, max_length("name", MAX_TEXT)),
    Rule("name_unique", "name", MSG_TAKEN, _name_unique),
    Rule("species_string", "species", MSG_NOT_STRING, string_or_null("species")),
    Rule("species_length", "species", MSG_TOO_LONG, max_length("species", MAX_TEXT)),
    Rule("likes_integer", "likes", MSG_NOT_NUMBER, integer("likes")),
    Rule("likes_max", "likes", MSG_TOO_BIG, at_most("likes", MAX_INT)),
    Rule("likes_min", "likes", MSG_TOO_SMALL, at_least("likes", MIN_INT)),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def permit(params: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only allow-listed keys; anything else is dropped silently."""
    return {k: v for k, v in params.items() if k in PERMITTED_FIELDS}


def _cast(attrs: Mapping[str, Any]) -> dict[str, Any]:
    """Apply column types to already-validated attributes."""
    out = dict(attrs)
    if "likes" in out:
        out["likes"] = to_integer(out["likes"])
    return out


def _commit(db: Session, bird: Bird, event: str) -> WriteResult:
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against the unique constraint on birds.name
        db.rollback()
        errors = ValidationErrors()
        errors.add("name", MSG_TAKEN)
        log.info("bird.rejected", errors=errors.messages, reason="integrity_error")
        return Rejected(errors)
    db.refresh(bird)
    log.info(event, bird_id=bird.id, name=bird.name)
    return Committed(bird)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def list_birds(db: Session) -> list[Bird]:
    return db.query(Bird).order_by(Bird.id.asc()).all()


def find_bird(db: Session, bird_id: Any) -> LookupResult:
    """Resolve a path id to a bird. Ids that are not integers never match."""
    try:
        pk = int(bird_id)
    except (TypeError, ValueError):
        log.info("bird.not_found", bird_id=bird_id)
        return NotFound()
    if not 0 < pk <= MAX_ID:
        log.info("bird.not_found", bird_id=pk)
        return NotFound()

    bird = db.query(Bird).filter(Bird.id == pk).first()
    if bird is None:
        log.info("bird.not_found", bird_id=pk)
        return NotFound()
    return Found(bird)


def create_bird(db: Session, params: Mapping[str, Any]) -> WriteResult:
    attrs = permit(params)
    candidate = {"name": None, "species": None, "likes": 0, **attrs}

    errors = validate(BIRD_RULES, candidate, {"db": db, "record": None})
    if errors:
        log.info("bird.rejected", errors=errors.messages)
        return Rejected(errors)

    bird = Bird(**_cast(candidate))
    db.add(bird)
    return _commit(db, bird, "bird.created")


def update_bird(db: Session, bird: Bird, params: Mapping[str, Any]) -> WriteResult:
    attrs = permit(params)
    candidate = {
        "name": bird.name,
        "species": bird.species,
        "likes": bird.likes,
        **attrs,
    }

    errors = validate(BIRD_RULES, candidate, {"db": db, "record": bird})
    if errors:
        log.info("bird.rejected", bird_id=bird.id, errors=errors.messages)
        return Rejected(errors)

    for key, value in _cast(attrs).items():
        setattr(bird, key, value)
    return _commit(db, bird, "bird.updated")


def destroy_bird(db: Session, bird: Bird) -> Destroyed:
    bird_id = bird.id
    db.delete(bird)
    db.commit()
    log.info("bird.destroyed", bird_id=bird_id)
    return Destroyed()
