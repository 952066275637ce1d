"""
Outcome variants and the single boundary translator.

Service functions never raise for expected conditions; they return one of

    Committed(entity)   write passed every rule and was committed
    Rejected(errors)    write broke one or more rules, nothing committed
    Found(entity)       lookup hit
    NotFound(resource)  lookup miss
    Destroyed()         delete committed

and routers hand the value to `render_outcome`, which is the only place
status codes and bodies for these conditions are decided.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from starlette import status

from aviary.core.config import settings
from aviary.core.validation import ValidationErrors


@dataclass
class Committed:
    entity: Any


@dataclass
class Rejected:
    errors: ValidationErrors


@dataclass
class Found:
    entity: Any


@dataclass
class NotFound:
    resource: str = "Bird"

    @property
    def message(self) -> str:
        return f"{self.resource} not found"


@dataclass
class Destroyed:
    pass


WriteResult = Union[Committed, Rejected]
LookupResult = Union[Found, NotFound]
Outcome = Union[Committed, Rejected, Found, NotFound, Destroyed]


def error_payload(errors: ValidationErrors, error_format: Optional[str] = None) -> Any:
    """Shape a ValidationErrors according to the deployment's ERROR_FORMAT."""
    fmt = error_format or settings.ERROR_FORMAT
    if fmt == "full_messages":
        return errors.full_messages
    return errors.messages


def render_outcome(
    outcome: Outcome,
    serialize: Callable[[Any], Any] = lambda entity: entity,
    *,
    success_status: int = status.HTTP_200_OK,
    error_format: Optional[str] = None,
) -> Response:
    """Translate any outcome variant into its HTTP response."""
    if isinstance(outcome, (Committed, Found)):
        return JSONResponse(
            status_code=success_status,
            content=jsonable_encoder(serialize(outcome.entity)),
        )
    if isinstance(outcome, Rejected):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"errors": error_payload(outcome.errors, error_format)},
        )
    if isinstance(outcome, NotFound):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": outcome.message},
        )
    if isinstance(outcome, Destroyed):
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    raise TypeError(f"Unknown outcome: {outcome!r}")
