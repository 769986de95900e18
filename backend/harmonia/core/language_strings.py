"""Language Strings — locale-specific message tables, grouped by namespace.

Invariants:
    - All strings are pure data (no IO, no computation beyond formatting)
    - English is complete for every namespace; other locales may omit keys
      and fall back to English (see core/locale_catalog.py)
    - Validation keys are constraint codes produced by core/validation.py

Design Decisions:
    - Namespaces mirror the consumers: "validation" (Validator), "datastore"
      (Datastore error messages), "app" (startup status lines)
    - str.format placeholders: {label} is the field name, {limit} the bound
"""

from harmonia.core.domain_types import Locale

VALIDATION = "validation"
DATASTORE = "datastore"
APP = "app"


# --- Validation messages ------------------------------------------------------

_VALIDATION: dict[Locale, dict[str, str]] = {
    Locale.EN: {
        "any.required": '"{label}" is required',
        "any.only": '"{label}" must be one of {valids}',
        "object.base": '"{label}" must be an object',
        "object.unknown": '"{label}" is not allowed',
        "string.base": '"{label}" must be a string',
        "string.min": '"{label}" length must be at least {limit} characters long',
        "string.max": (
            '"{label}" length must be less than or equal to {limit} characters long'
        ),
        "string.pattern": '"{label}" fails to match the required pattern',
        "number.base": '"{label}" must be a number',
        "number.integer": '"{label}" must be an integer',
        "number.min": '"{label}" must be greater than or equal to {limit}',
        "number.max": '"{label}" must be less than or equal to {limit}',
        "boolean.base": '"{label}" must be a boolean',
        "array.base": '"{label}" must be an array',
        "array.min": '"{label}" must contain at least {limit} items',
        "array.max": '"{label}" must contain less than or equal to {limit} items',
        "json.base": '"{label}" must be valid JSON',
    },
    Locale.PT_BR: {
        "any.required": '"{label}" é obrigatório',
        "any.only": '"{label}" deve ser um de {valids}',
        "object.base": '"{label}" deve ser um objeto',
        "object.unknown": '"{label}" não é permitido',
        "string.base": '"{label}" deve ser um texto',
        "string.min": '"{label}" deve ter pelo menos {limit} caracteres',
        "string.max": '"{label}" deve ter no máximo {limit} caracteres',
        "string.pattern": '"{label}" não corresponde ao padrão exigido',
        "number.base": '"{label}" deve ser um número',
        "number.integer": '"{label}" deve ser um número inteiro',
        "number.min": '"{label}" deve ser maior ou igual a {limit}',
        "number.max": '"{label}" deve ser menor ou igual a {limit}',
        "boolean.base": '"{label}" deve ser verdadeiro ou falso',
        "array.base": '"{label}" deve ser uma lista',
        "array.min": '"{label}" deve conter pelo menos {limit} itens',
        "array.max": '"{label}" deve conter no máximo {limit} itens',
    },
}


# --- Datastore messages -------------------------------------------------------

_DATASTORE: dict[Locale, dict[str, str]] = {
    Locale.EN: {
        "connect.failed": "could not connect to database '{name}'",
        "connect.timeout": "connection to database '{name}' timed out after {seconds}s",
        "connect.ok": "connected to database '{name}'",
        "query.count": "count query failed",
        "query.fetch": "fetch query failed",
        "not_connected": "no database connection is open",
    },
    Locale.PT_BR: {
        "connect.failed": "não foi possível conectar ao banco '{name}'",
        "connect.timeout": "conexão ao banco '{name}' expirou após {seconds}s",
        "connect.ok": "conectado ao banco '{name}'",
        "query.count": "falha na consulta de contagem",
        "query.fetch": "falha na consulta de busca",
        "not_connected": "nenhuma conexão de banco aberta",
    },
}


# --- Application status lines -------------------------------------------------

_APP: dict[Locale, dict[str, str]] = {
    Locale.EN: {
        "no_database": "[!]\t No database to connect.",
        "listening": "{name} on at {host}:{port}",
        "ssl_on": "[SSL_ON]\tSecure",
        "ssl_off": "[SSL_OFF]\tNOT SECURE (!)",
    },
    Locale.PT_BR: {
        "no_database": "[!]\t Nenhum banco de dados para conectar.",
        "listening": "{name} ativo em {host}:{port}",
        "ssl_on": "[SSL_ON]\tSeguro",
        "ssl_off": "[SSL_OFF]\tNÃO SEGURO (!)",
    },
}


_NAMESPACES: dict[str, dict[Locale, dict[str, str]]] = {
    VALIDATION: _VALIDATION,
    DATASTORE: _DATASTORE,
    APP: _APP,
}


def namespaces() -> tuple[str, ...]:
    return tuple(_NAMESPACES)


def get_table(namespace: str, locale: Locale) -> dict[str, str]:
    """Raw table for one namespace/locale. Empty dict if the locale has none."""
    return dict(_NAMESPACES[namespace].get(locale, {}))
