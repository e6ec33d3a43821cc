"""mdstamp: stamp timestamps and computed metadata into markdown frontmatter."""

from __future__ import annotations

from mdstamp.domain.document import Diagnostic, Document, Node, make_root
from mdstamp.domain.fields import (
    CREATED_TIME,
    LAST_MODIFIED_TIME,
    Computed,
    LiteralValue,
    Record,
    TimeReference,
    UpdatePolicy,
    policy_predicate,
)
from mdstamp.domain.matter import MatterFormatError
from mdstamp.infrastructure.git import GitQueryError
from mdstamp.services.times import TimeContext, format_timestamp, parse_timestamp
from mdstamp.services.transform import MetadataTransformer, metadata

__version__ = "0.1.0"

__all__ = [
    "CREATED_TIME",
    "LAST_MODIFIED_TIME",
    "Computed",
    "Diagnostic",
    "Document",
    "GitQueryError",
    "LiteralValue",
    "MatterFormatError",
    "MetadataTransformer",
    "Node",
    "Record",
    "TimeContext",
    "TimeReference",
    "UpdatePolicy",
    "__version__",
    "format_timestamp",
    "make_root",
    "metadata",
    "parse_timestamp",
    "policy_predicate",
]
