"""Schema Validation — declarative field schemas compiled into pydantic models.

Invariants:
    - A Schema is pure data: field name -> Field(kind, constraints, required)
    - Constraints are tagged variants from annotated_types (MinLen, MaxLen, Ge,
      Le) plus pydantic's StringConstraints for patterns; a field's allowed
      values are a Literal built from Field.choices
    - validate() never raises on bad input; it returns details. It raises only
      when the Validator has no bound locale catalog (startup ordering bug)
    - All errors for a payload are collected (no early abort) so clients see
      every failing field at once
    - An explicit null is a type error, not an absent field

Design Decisions:
    - pydantic does the checking; this module only maps pydantic error types
      onto the stable codes that key the locale's "validation" table
    - Bodies validate in strict mode (JSON already carries types); query strings
      validate in lax mode so text converts to the declared kind
"""

import copy
import re
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from types import MappingProxyType
from typing import Annotated, Any, Literal, Mapping, Union

from annotated_types import Ge, Le, MaxLen, MinLen
from pydantic import (
    BaseModel, BeforeValidator, ConfigDict, Json, StringConstraints, create_model,
)
from pydantic import Field as ModelField
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from harmonia.core.domain_types import Locale
from harmonia.core.errors import ValidatorNotConfiguredError


class Kind(str, Enum):
    """Declared type of a field."""
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    JSON = "json"  # text that must decode to a JSON object (query strings)


Constraint = Union[MinLen, MaxLen, Ge, Le, StringConstraints]


# ─── Schema ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class Field:
    """One field: its kind, constraints, and (for arrays) the item field."""
    kind: Kind
    constraints: tuple[Constraint, ...] = ()
    required: bool = False
    items: "Field | None" = None
    choices: tuple = ()
    default: Any = None


@dataclass(frozen=True)
class Schema:
    fields: Mapping[str, Field]
    allow_unknown: bool = False


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of one validate() call. `details` present means failure."""
    details: tuple[dict, ...] | None = None
    value: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.details is None


# ─── Compilation ─────────────────────────────────────────────────

_BASE_TYPES = {
    Kind.STRING: str,
    Kind.INTEGER: int,
    Kind.NUMBER: float,
    Kind.BOOLEAN: bool,
    Kind.OBJECT: dict[str, Any],
    Kind.JSON: Json[dict[str, Any]],
}

_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")


def _integer_text(value: Any) -> Any:
    """Query integers are plain digits: no underscores, no decimal point."""
    if isinstance(value, str) and not _INTEGER_TEXT.fullmatch(value.strip()):
        raise PydanticCustomError("int_parsing", "Input should be a valid integer")
    return value


def _annotation(spec: Field, coerce: bool) -> Any:
    if spec.choices:
        base = Literal[spec.choices]
    elif spec.kind is Kind.ARRAY:
        base = list[_annotation(spec.items, coerce)] if spec.items else list[Any]
    elif spec.kind is Kind.INTEGER and coerce:
        base = Annotated[int, BeforeValidator(_integer_text)]
    else:
        base = _BASE_TYPES[spec.kind]
    if not spec.constraints:
        return base
    return Annotated[(base, *spec.constraints)]


def compile_schema(schema: Schema, coerce: bool = False) -> type[BaseModel]:
    """Build the pydantic model that checks payloads against `schema`.

    Optional fields keep their non-nullable type with a None default, so an
    absent field passes and an explicit null fails the type check.
    """
    definitions: dict[str, Any] = {}
    for name, spec in schema.fields.items():
        annotation = _annotation(spec, coerce)
        if spec.required:
            definitions[name] = (annotation, ...)
        elif spec.default is not None:
            definitions[name] = (
                annotation,
                ModelField(default_factory=partial(copy.deepcopy, spec.default)),
            )
        else:
            definitions[name] = (annotation, None)
    return create_model(
        "SchemaModel",
        __config__=ConfigDict(
            extra="allow" if schema.allow_unknown else "forbid",
            strict=not coerce,
        ),
        **definitions,
    )


# ─── Error mapping ───────────────────────────────────────────────

_ERROR_CODES = {
    "missing": "any.required",
    "literal_error": "any.only",
    "extra_forbidden": "object.unknown",
    "model_type": "object.base",
    "model_attributes_type": "object.base",
    "dict_type": "object.base",
    "string_type": "string.base",
    "string_too_short": "string.min",
    "string_too_long": "string.max",
    "string_pattern_mismatch": "string.pattern",
    "int_type": "number.integer",
    "int_parsing": "number.integer",
    "int_from_float": "number.integer",
    "float_type": "number.base",
    "float_parsing": "number.base",
    "finite_number": "number.base",
    "greater_than_equal": "number.min",
    "less_than_equal": "number.max",
    "bool_type": "boolean.base",
    "bool_parsing": "boolean.base",
    "list_type": "array.base",
    "too_short": "array.min",
    "too_long": "array.max",
    "json_invalid": "json.base",
    "json_type": "json.base",
}

_LIMIT_KEYS = ("min_length", "max_length", "ge", "le")


def _field_at(schema: Schema, loc: tuple) -> Field | None:
    """The Field an error location points at (array indexes descend to items)."""
    if not loc or loc[0] not in schema.fields:
        return None
    spec = schema.fields[loc[0]]
    for _ in loc[1:]:
        spec = spec.items
        if spec is None:
            return None
    return spec


def _params(error: dict, spec: Field | None) -> dict:
    if error["type"] == "literal_error" and spec is not None:
        return {"valids": ", ".join(str(c) for c in spec.choices)}
    ctx = error.get("ctx") or {}
    for key in _LIMIT_KEYS:
        if key in ctx:
            return {"limit": ctx[key]}
    if "pattern" in ctx:
        return {"regex": ctx["pattern"]}
    return {}


# ─── Validator ───────────────────────────────────────────────────

class Validator:
    """Generic schema interpreter bound to one locale's message table.

    Usage order is fixed: set_locale() -> sync_settings() -> validate().
    Routers attach validation dependencies that read this object, so it
    must be configured before any router is registered.
    """

    def __init__(self):
        self._locale: Locale | None = None
        self._pending: dict[str, str] | None = None
        self._messages: Mapping[str, str] | None = None

    @property
    def locale(self) -> Locale | None:
        return self._locale

    @property
    def is_configured(self) -> bool:
        return self._messages is not None

    def set_locale(self, locale: Locale, message_table: Mapping[str, str]) -> None:
        self._locale = locale
        self._pending = dict(message_table)

    def sync_settings(self) -> None:
        """Freeze the pending message table; validation becomes available."""
        if self._pending is None:
            raise ValidatorNotConfiguredError()
        self._messages = MappingProxyType(self._pending)

    def validate(
        self, schema: Schema, payload: Any, coerce: bool = False,
    ) -> ValidationOutcome:
        if self._messages is None:
            raise ValidatorNotConfiguredError()
        model = compile_schema(schema, coerce)
        try:
            instance = model.model_validate(payload)
        except PydanticValidationError as e:
            return ValidationOutcome(
                details=tuple(self._localise(schema, err) for err in e.errors()),
            )

        value = instance.model_dump(exclude_unset=True)
        for name, spec in schema.fields.items():
            if name not in value and spec.default is not None:
                value[name] = getattr(instance, name)
        value.update(instance.model_extra or {})
        return ValidationOutcome(value=value)

    def _localise(self, schema: Schema, error: dict) -> dict:
        loc = tuple(error["loc"])
        spec = _field_at(schema, loc)
        if spec is not None and spec.kind is Kind.JSON:
            code = "json.base"
        else:
            code = _ERROR_CODES.get(error["type"], error["type"])
        path = ".".join(str(part) for part in loc) or "value"
        return self.detail(path, code, _params(error, spec))

    def detail(self, path: str, code: str, params: dict | None = None) -> dict:
        """One localised error entry: {field, message, type, context}."""
        if self._messages is None:
            raise ValidatorNotConfiguredError()
        context = {"label": path, "key": path.rsplit(".", 1)[-1], **(params or {})}
        template = self._messages.get(code, code)
        return {
            "field": path,
            "message": template.format(**context),
            "type": code,
            "context": context,
        }
