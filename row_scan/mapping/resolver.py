"""Column resolver.

Maps result-set columns onto record fields. Per column, first match wins:

1. a field whose alias equals the column name (case-insensitive)
2. a field whose declared name equals the column name (case-insensitive)
3. the field at the same ordinal position
4. otherwise the column is discarded

Excess columns are discarded and excess fields are left unwritten; neither
is an error. Duplicate column names are resolved independently, so two
columns can target the same field (the later column wins when mapping).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from row_scan.mapping.descriptor import FieldDescriptor, RecordDescriptor
from row_scan.mapping.plan import DISCARD, MappingPlan

logger = logging.getLogger(__name__)


def _index(
    descriptor: RecordDescriptor,
) -> tuple[dict[str, FieldDescriptor], dict[str, FieldDescriptor]]:
    by_alias: dict[str, FieldDescriptor] = {}
    by_name: dict[str, FieldDescriptor] = {}
    for f in descriptor.fields:
        if f.alias is not None:
            by_alias.setdefault(f.alias.lower(), f)
        by_name.setdefault(f.name.lower(), f)
    return by_alias, by_name


def resolve(columns: Sequence[str], descriptor: RecordDescriptor) -> MappingPlan:
    """Build the mapping plan for a column set against a record descriptor."""
    by_alias, by_name = _index(descriptor)
    fields = descriptor.fields

    targets: list[FieldDescriptor | None] = []
    for position, column in enumerate(columns):
        key = column.lower()
        target = by_alias.get(key)
        if target is None:
            target = by_name.get(key)
        if target is None and position < len(fields):
            target = fields[position]
        targets.append(target if target is not None else DISCARD)

    plan = MappingPlan(
        descriptor=descriptor,
        columns=tuple(columns),
        targets=tuple(targets),
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Resolved columns for %s: %s", descriptor.name, plan.describe())
    return plan
