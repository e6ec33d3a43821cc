"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, mdstamp.toml only contains
overrides. A config with just a ``[metadata]`` table is complete.

In TOML a field is either a plain string (a literal value) or a table::

    [metadata]
    tag = "docs"
    created = { time = "created" }
    updated = { time = "modified", update = "never" }
    title = { value = "Untitled", update = "empty" }
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, model_validator

from mdstamp.domain.fields import (
    FieldSpec,
    LiteralValue,
    Record,
    TimeReference,
    TimeSource,
    UpdatePolicy,
    policy_predicate,
)


class FieldConfig(BaseModel):
    """One entry of the ``[metadata]`` table."""

    model_config = {"frozen": True, "extra": "forbid"}

    value: str | None = None
    time: Literal["created", "modified"] | None = None
    update: UpdatePolicy = UpdatePolicy.ALWAYS

    @model_validator(mode="before")
    @classmethod
    def _literal_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"value": data}
        return data

    @model_validator(mode="after")
    def _exactly_one_source(self) -> FieldConfig:
        if (self.value is None) == (self.time is None):
            msg = "field needs exactly one of 'value' or 'time'"
            raise ValueError(msg)
        return self

    def to_spec(self) -> FieldSpec:
        """Convert to a field spec understood by the transformer."""
        if self.time is not None:
            source: LiteralValue | TimeReference = TimeReference(TimeSource(self.time))
        else:
            assert self.value is not None
            source = LiteralValue(self.value)
        predicate = policy_predicate(self.update)
        if predicate is None:
            return source
        return Record(value=source, should_update=predicate)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".mdstamp/plugins"
