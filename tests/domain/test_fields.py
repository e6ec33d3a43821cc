"""Tests for field specs: variants, coercion and named update policies."""

from __future__ import annotations

import pytest

from mdstamp.domain.fields import (
    CREATED_TIME,
    LAST_MODIFIED_TIME,
    Computed,
    LiteralValue,
    Record,
    TimeReference,
    TimeSource,
    UpdatePolicy,
    coerce_field_spec,
    coerce_field_specs,
    policy_predicate,
    update_predicate,
    value_spec,
)


def _title(ctx: object) -> str:
    return "Title"


class TestSentinels:
    def test_time_references_are_distinct(self) -> None:
        assert CREATED_TIME != LAST_MODIFIED_TIME
        assert CREATED_TIME.source is TimeSource.CREATED
        assert LAST_MODIFIED_TIME.source is TimeSource.MODIFIED

    def test_equal_by_value(self) -> None:
        assert TimeReference(TimeSource.MODIFIED) == LAST_MODIFIED_TIME

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            CREATED_TIME.source = TimeSource.MODIFIED  # type: ignore[misc]


class TestCoerceFieldSpec:
    def test_string_is_literal(self) -> None:
        assert coerce_field_spec("bar") == LiteralValue("bar")

    def test_string_resembling_sentinel_stays_literal(self) -> None:
        assert coerce_field_spec("created") == LiteralValue("created")

    def test_callable_is_computed(self) -> None:
        assert coerce_field_spec(_title) == Computed(_title)

    def test_variants_pass_through(self) -> None:
        assert coerce_field_spec(CREATED_TIME) is CREATED_TIME
        record = Record(value=LiteralValue("x"))
        assert coerce_field_spec(record) is record

    def test_mapping_becomes_record(self) -> None:
        def predicate(new: str, old: object) -> bool:
            return True

        spec = coerce_field_spec({"value": _title, "should_update": predicate})
        assert spec == Record(value=Computed(_title), should_update=predicate)

    def test_mapping_accepts_camel_case_predicate(self) -> None:
        def predicate(new: str, old: object) -> bool:
            return False

        spec = coerce_field_spec({"value": "x", "shouldUpdate": predicate})
        assert isinstance(spec, Record)
        assert spec.should_update is predicate

    def test_mapping_without_predicate(self) -> None:
        spec = coerce_field_spec({"value": LAST_MODIFIED_TIME})
        assert spec == Record(value=LAST_MODIFIED_TIME)

    def test_non_callable_predicate_rejected(self) -> None:
        with pytest.raises(TypeError, match="should_update must be callable"):
            coerce_field_spec({"value": "x", "should_update": "yes"})

    @pytest.mark.parametrize("raw", [42, None, ["a"], {"other": 1}, {"value": 3}])
    def test_unrecognized_shapes(self, raw: object) -> None:
        assert coerce_field_spec(raw) is None

    def test_coerce_many_keeps_order(self) -> None:
        specs = coerce_field_specs({"b": "1", "a": CREATED_TIME, "c": 7})
        assert list(specs) == ["b", "a", "c"]
        assert specs["c"] is None

    def test_coerce_none(self) -> None:
        assert coerce_field_specs(None) == {}


class TestUnwrap:
    def test_value_spec_unwraps_record(self) -> None:
        assert value_spec(Record(value=CREATED_TIME)) is CREATED_TIME
        assert value_spec(CREATED_TIME) is CREATED_TIME

    def test_update_predicate(self) -> None:
        def predicate(new: str, old: object) -> bool:
            return True

        assert update_predicate(Record(value=CREATED_TIME, should_update=predicate)) is predicate
        assert update_predicate(CREATED_TIME) is None
        assert update_predicate(None) is None


class TestPolicies:
    def test_always_has_no_predicate(self) -> None:
        assert policy_predicate(UpdatePolicy.ALWAYS) is None

    def test_never(self) -> None:
        never = policy_predicate("never")
        assert never is not None
        assert never("new", None) is False
        assert never("new", "old") is False

    def test_empty(self) -> None:
        empty = policy_predicate(UpdatePolicy.EMPTY)
        assert empty is not None
        assert empty("new", None) is True
        assert empty("new", "") is True
        assert empty("new", "old") is False

    def test_unknown_policy(self) -> None:
        with pytest.raises(ValueError):
            policy_predicate("sometimes")
