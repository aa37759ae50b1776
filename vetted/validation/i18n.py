"""Message Translation

Re-words the issues of a ``ValidationError`` after the fact. A resolver
maps an issue code key to a message template; ``{param}`` placeholders
are filled from ``IssueCode.params()``. Issues whose key the resolver
does not know keep their original message.

Usage:
    translated = translate_error(err, MapResolver({"too_small": "Debe tener al menos {minimum}"}))
    translated = translate_error(err, german())
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Mapping, Protocol

from .errors import ValidationError


class MessageResolver(Protocol):
    def resolve(self, key: str) -> str | None: ...


@dataclass(frozen=True, slots=True)
class MapResolver:
    """Template lookup from a fixed mapping."""
    templates: Mapping[str, str] = field(default_factory=dict)

    def resolve(self, key: str) -> str | None:
        return self.templates.get(key)


@dataclass(frozen=True, slots=True)
class FnResolver:
    """Template lookup through a callable returning None for unknown keys."""
    fn: Callable[[str], str | None]

    def resolve(self, key: str) -> str | None:
        return self.fn(key)


def _fill(template: str, params: Mapping[str, str]) -> str:
    for key, value in params.items(): template = template.replace(f"{{{key}}}", value)
    return template


def translate_error(error: ValidationError, resolver: MessageResolver) -> ValidationError:
    """Return a new error with every known issue re-worded."""
    return ValidationError([
        replace(i, message=_fill(t, i.code.params())) if (t := resolver.resolve(i.code.key)) is not None else i
        for i in error
    ])


# ============================================================================
# Built-in catalogues
# ============================================================================

def english() -> MapResolver:
    return MapResolver({
        "invalid_type": "Expected {expected}, received {received}",
        "too_small": "Value must be at least {minimum}",
        "too_big": "Value must be at most {maximum}",
        "invalid_string": "Invalid {validation}",
        "not_int": "Expected integer, received float",
        "not_finite": "Number must be finite",
        "missing_field": "Required field is missing",
        "unrecognized_field": "Unrecognized field",
    })


def russian() -> MapResolver:
    return MapResolver({
        "invalid_type": "Ожидалось {expected}, получено {received}",
        "too_small": "Значение должно быть не менее {minimum}",
        "too_big": "Значение должно быть не более {maximum}",
        "invalid_string": "Некорректное значение ({validation})",
        "not_int": "Ожидалось целое число",
        "not_finite": "Число должно быть конечным",
        "missing_field": "Обязательное поле отсутствует",
        "unrecognized_field": "Неизвестное поле",
    })


def german() -> MapResolver:
    return MapResolver({
        "invalid_type": "{expected} erwartet, {received} erhalten",
        "too_small": "Wert muss mindestens {minimum} sein",
        "too_big": "Wert darf höchstens {maximum} sein",
        "invalid_string": "Ungültiger Wert ({validation})",
        "not_int": "Ganzzahl erwartet",
        "not_finite": "Zahl muss endlich sein",
        "missing_field": "Pflichtfeld fehlt",
        "unrecognized_field": "Unbekanntes Feld",
    })


def spanish() -> MapResolver:
    return MapResolver({
        "invalid_type": "Se esperaba {expected}, se recibió {received}",
        "too_small": "El valor debe ser al menos {minimum}",
        "too_big": "El valor debe ser como máximo {maximum}",
        "invalid_string": "Valor inválido ({validation})",
        "not_int": "Se esperaba un número entero",
        "not_finite": "El número debe ser finito",
        "missing_field": "Falta el campo obligatorio",
        "unrecognized_field": "Campo no reconocido",
    })
