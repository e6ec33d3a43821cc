"""Field evaluation: turn a field spec into a candidate string value."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mdstamp.domain.fields import (
    Computed,
    FieldSpec,
    LiteralValue,
    TimeReference,
    TimeSource,
    value_spec,
)

if TYPE_CHECKING:
    from mdstamp.services.times import TimeContext

logger = logging.getLogger(__name__)


def evaluate_field(spec: FieldSpec | None, context: TimeContext) -> str | None:
    """Compute the value for *spec*.

    Returns None when the field produces no value this pass: an
    unrecognized spec, or a computed field returning None. Exceptions
    raised by computed fields propagate.
    """
    if spec is None:
        return None
    value = value_spec(spec)

    if isinstance(value, TimeReference):
        if value.source is TimeSource.CREATED:
            return context.created_time
        return context.modified_time

    if isinstance(value, LiteralValue):
        return value.text

    if isinstance(value, Computed):
        result = value.func(context)
        if result is None:
            return None
        return result if isinstance(result, str) else str(result)

    return None


def evaluate_fields(
    specs: dict[str, FieldSpec | None],
    context: TimeContext,
) -> dict[str, str]:
    """Evaluate every spec in order, dropping fields with no value."""
    values: dict[str, str] = {}
    for name, spec in specs.items():
        value = evaluate_field(spec, context)
        if value is None:
            logger.debug("field %r produced no value; skipped", name)
            continue
        values[name] = value
    return values
