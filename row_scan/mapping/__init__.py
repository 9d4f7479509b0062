"""Mapping layer - copy result rows into scalars and records."""

from __future__ import annotations

from row_scan.mapping.descriptor import (
    Column,
    FieldDescriptor,
    RecordDescriptor,
    describe,
    record,
)
from row_scan.mapping.destination import DestinationShape, Out, Rows, detect_shape
from row_scan.mapping.plan import DISCARD, MappingPlan
from row_scan.mapping.resolver import resolve
from row_scan.mapping.row import RowMapper, scan_scalars

__all__ = [
    "Column",
    "record",
    "describe",
    "FieldDescriptor",
    "RecordDescriptor",
    "Out",
    "Rows",
    "DestinationShape",
    "detect_shape",
    "DISCARD",
    "MappingPlan",
    "resolve",
    "RowMapper",
    "scan_scalars",
]
