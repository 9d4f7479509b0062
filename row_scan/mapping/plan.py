"""Mapping plan data class.

A MappingPlan assigns every column of one result set to a record field,
or to the discard sink. Used by RowMapper at execution time.
"""

from __future__ import annotations

from dataclasses import dataclass

from row_scan.mapping.descriptor import FieldDescriptor, RecordDescriptor

# Target of a column whose value is read and dropped.
DISCARD = None


@dataclass(frozen=True)
class MappingPlan:
    """Column index -> field (or DISCARD) assignment for one result set."""

    descriptor: RecordDescriptor
    columns: tuple[str, ...]
    targets: tuple[FieldDescriptor | None, ...]

    def __len__(self) -> int:
        return len(self.columns)

    @property
    def discarded(self) -> tuple[int, ...]:
        """Indexes of columns mapped to the discard sink."""
        return tuple(i for i, target in enumerate(self.targets) if target is DISCARD)

    def describe(self) -> dict[str, str | None]:
        """Column name -> field name, for logging and debugging."""
        return {
            column: (target.name if target is not None else None)
            for column, target in zip(self.columns, self.targets, strict=True)
        }
