"""Request Dependencies — environment/validator access and schema-driven validation.

Invariants:
    - Validation dependencies read the Validator bound on app.state; the
      orchestrator binds it before any router exists
    - Failed validation raises ValidationError (422 envelope, all field details)
    - Query strings are coerced to declared kinds; bodies are not
"""

from dataclasses import dataclass
from typing import Any, Callable

from fastapi import Depends, Request

from harmonia.config import Environment
from harmonia.core.errors import ValidationError
from harmonia.core.validation import Schema, Validator
from harmonia.schemas.pagination import page_query_schema


def get_environment(request: Request) -> Environment:
    return request.app.state.environment


def get_validator(request: Request) -> Validator:
    return request.app.state.validator


def validate_body(schema_factory: Callable[[], Schema]):
    """Build a dependency that validates the JSON body against a schema."""

    async def dependency(
        request: Request, validator: Validator = Depends(get_validator),
    ) -> dict:
        try:
            payload: Any = await request.json()
        except ValueError:
            raise ValidationError([validator.detail("body", "object.base")])
        outcome = validator.validate(schema_factory(), payload)
        if not outcome.ok:
            raise ValidationError(list(outcome.details))
        return outcome.value

    return dependency


@dataclass(frozen=True)
class PageQuery:
    aggregate: dict
    limit: int
    page: int


def page_query(
    request: Request, validator: Validator = Depends(get_validator),
) -> PageQuery:
    """Validate ?aggregate=&limit=&page= for collection reads."""
    outcome = validator.validate(
        page_query_schema(), dict(request.query_params), coerce=True,
    )
    if not outcome.ok:
        raise ValidationError(list(outcome.details))
    return PageQuery(
        aggregate=outcome.value["aggregate"],
        limit=outcome.value["limit"],
        page=outcome.value["page"],
    )
