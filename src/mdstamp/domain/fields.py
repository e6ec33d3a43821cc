"""Field specifications: what value a frontmatter field should receive.

A field spec is one of a closed set of variants:

- :class:`LiteralValue` - a fixed string.
- :class:`TimeReference` - the document's created or last-modified time.
  :data:`CREATED_TIME` and :data:`LAST_MODIFIED_TIME` are the two instances.
- :class:`Computed` - a callable receiving the time context.
- :class:`Record` - one of the above plus an optional ``should_update``
  predicate deciding whether a new value replaces an existing one.

Callers configuring mdstamp from Python may pass looser shapes (plain
strings, bare callables, ``{"value": ..., "should_update": ...}`` dicts);
:func:`coerce_field_spec` normalizes them. A plain string is always a
literal, even when its text looks like a sentinel.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

UpdatePredicate = Callable[[str, Any], Any]


class TimeSource(StrEnum):
    CREATED = "created"
    MODIFIED = "modified"


class UpdatePolicy(StrEnum):
    """Named update policies expressible in a config file."""

    ALWAYS = "always"
    NEVER = "never"
    EMPTY = "empty"


@dataclass(frozen=True)
class LiteralValue:
    text: str


@dataclass(frozen=True)
class TimeReference:
    source: TimeSource


@dataclass(frozen=True)
class Computed:
    """Value derived by calling ``func(context)``.

    ``context`` exposes ``modified_time``, ``created_time`` and ``document``.
    """

    func: Callable[[Any], Any]


ValueSpec = LiteralValue | TimeReference | Computed


@dataclass(frozen=True)
class Record:
    value: ValueSpec
    should_update: UpdatePredicate | None = None


FieldSpec = ValueSpec | Record

CREATED_TIME = TimeReference(TimeSource.CREATED)
LAST_MODIFIED_TIME = TimeReference(TimeSource.MODIFIED)

_VALUE_TYPES = (LiteralValue, TimeReference, Computed)


def _coerce_value(raw: Any) -> ValueSpec | None:
    if isinstance(raw, _VALUE_TYPES):
        return raw
    if isinstance(raw, str):
        return LiteralValue(raw)
    if callable(raw):
        return Computed(raw)
    return None


def coerce_field_spec(raw: Any) -> FieldSpec | None:
    """Normalize a caller-supplied field spec.

    Returns None when *raw* has no recognized shape; such fields are
    skipped during evaluation.
    """
    if isinstance(raw, Record):
        return raw
    if isinstance(raw, Mapping):
        if "value" not in raw:
            return None
        value = _coerce_value(raw["value"])
        if value is None:
            return None
        predicate = raw.get("should_update", raw.get("shouldUpdate"))
        if predicate is not None and not callable(predicate):
            msg = f"should_update must be callable, got {type(predicate).__name__}"
            raise TypeError(msg)
        return Record(value=value, should_update=predicate)
    return _coerce_value(raw)


def coerce_field_specs(raw: Mapping[str, Any] | None) -> dict[str, FieldSpec | None]:
    """Apply :func:`coerce_field_spec` to every entry, keeping order."""
    return {name: coerce_field_spec(spec) for name, spec in (raw or {}).items()}


def value_spec(spec: FieldSpec) -> ValueSpec:
    """Unwrap a :class:`Record` to the value spec it carries."""
    if isinstance(spec, Record):
        return spec.value
    return spec


def update_predicate(spec: FieldSpec | None) -> UpdatePredicate | None:
    """Return the ``should_update`` predicate of *spec*, if any."""
    if isinstance(spec, Record):
        return spec.should_update
    return None


# ---------------------------------------------------------------------------
# Named policies
# ---------------------------------------------------------------------------


def _never(new_value: str, old_value: Any) -> bool:
    return False


def _empty(new_value: str, old_value: Any) -> bool:
    return old_value is None or old_value == ""


_POLICY_PREDICATES: dict[UpdatePolicy, UpdatePredicate | None] = {
    UpdatePolicy.ALWAYS: None,
    UpdatePolicy.NEVER: _never,
    UpdatePolicy.EMPTY: _empty,
}


def policy_predicate(policy: UpdatePolicy | str) -> UpdatePredicate | None:
    """Return the predicate for a named policy (None means always update)."""
    return _POLICY_PREDICATES[UpdatePolicy(policy)]
