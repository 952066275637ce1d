"""
Birds router.

GET    /birds        — list all birds
POST   /birds        — create a bird
GET    /birds/{id}   — show one bird
PATCH  /birds/{id}   — update a bird (PUT is accepted as an alias)
DELETE /birds/{id}   — destroy a bird

Handlers only extract parameters and call the service; every outcome is
turned into a response by `render_outcome`.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from aviary.core.outcomes import NotFound, render_outcome
from aviary.db.base import get_db
from aviary.models.bird import Bird
from aviary.schemas.bird import BIRD_BODY_EXAMPLES, BirdResponse
from aviary.schemas.common import NotFoundResponse, UnprocessableEntityResponse
from aviary.services.birds import (
    create_bird,
    destroy_bird,
    find_bird,
    list_birds,
    update_bird,
)

router = APIRouter(prefix="/birds", tags=["birds"])

_NOT_FOUND = {404: {"model": NotFoundResponse, "description": "No bird with that id."}}
_REJECTED = {
    422: {
        "model": UnprocessableEntityResponse,
        "description": "One or more validation rules failed; nothing was saved.",
    }
}

BirdParams = Body(
    default=None,
    description=(
        "Bird attributes. Only `name`, `species` and `likes` are applied; "
        "other keys are ignored. A missing body counts as no attributes."
    ),
    openapi_examples=BIRD_BODY_EXAMPLES,
)


def _serialize(bird: Bird) -> dict[str, Any]:
    return BirdResponse.model_validate(bird).model_dump(mode="json")


@router.get(
    "",
    response_model=list[BirdResponse],
    summary="List birds",
)
def index(db: Session = Depends(get_db)):
    """Return every bird, oldest first."""
    return list_birds(db)


@router.post(
    "",
    response_model=BirdResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a bird",
    responses=_REJECTED,
)
def create(payload: Optional[dict[str, Any]] = BirdParams, db: Session = Depends(get_db)):
    """
    Validate and save a new bird.

    Returns **201** with the saved bird, or **422** with every failed rule.
    """
    outcome = create_bird(db, payload or {})
    return render_outcome(outcome, _serialize, success_status=status.HTTP_201_CREATED)


@router.get(
    "/{bird_id}",
    response_model=BirdResponse,
    summary="Show a bird",
    responses=_NOT_FOUND,
)
def show(bird_id: str, db: Session = Depends(get_db)):
    return render_outcome(find_bird(db, bird_id), _serialize)


@router.patch(
    "/{bird_id}",
    response_model=BirdResponse,
    summary="Update a bird",
    responses={**_NOT_FOUND, **_REJECTED},
)
@router.put(
    "/{bird_id}",
    response_model=BirdResponse,
    summary="Update a bird",
    responses={**_NOT_FOUND, **_REJECTED},
    include_in_schema=False,
)
def update(
    bird_id: str,
    payload: Optional[dict[str, Any]] = BirdParams,
    db: Session = Depends(get_db),
):
    """
    Apply the submitted attributes to an existing bird.

    Raises nothing: **404** if the id is unknown, **422** if any rule fails
    (the stored bird is left untouched), **200** otherwise.
    """
    lookup = find_bird(db, bird_id)
    if isinstance(lookup, NotFound):
        return render_outcome(lookup)
    return render_outcome(update_bird(db, lookup.entity, payload or {}), _serialize)


@router.delete(
    "/{bird_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a bird",
    responses=_NOT_FOUND,
)
def destroy(bird_id: str, db: Session = Depends(get_db)):
    lookup = find_bird(db, bird_id)
    if isinstance(lookup, NotFound):
        return render_outcome(lookup)
    return render_outcome(destroy_bird(db, lookup.entity))
