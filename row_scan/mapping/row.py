"""Row mapper.

Copies one fetched row into a destination according to a MappingPlan.
Every value is converted before anything is written, so a failed scan
never leaves a half-filled record behind.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from row_scan.core.exceptions import ScanError
from row_scan.mapping.destination import Out
from row_scan.mapping.plan import DISCARD, MappingPlan


def _row_values(row: Any, width: int) -> Sequence[Any]:
    """Return the raw values of a row in column order.

    Handles both tuple-like rows and dict-like rows from different adapters.
    """
    if isinstance(row, dict):
        values = list(row.values())
    else:
        values = list(row)
    if len(values) != width:
        raise ScanError(
            min(len(values), width),
            None,
            "row",
            f"expected {width} columns, row has {len(values)}",
        )
    return values


def _error_detail(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(err["msg"] for err in exc.errors())
    return str(exc)


class RowMapper:
    """Row mapper bound to the plan of one result set.

    Args:
        plan: Mapping plan resolved from the result set's columns.
    """

    def __init__(self, plan: MappingPlan) -> None:
        self._plan = plan

    @property
    def plan(self) -> MappingPlan:
        return self._plan

    def convert(self, row: Any) -> dict[str, Any]:
        """Convert a raw row into field name -> value, in column order.

        Discarded columns are read and dropped. When two columns target the
        same field, the later column wins.

        Raises:
            ScanError: If a value cannot be converted to its field's type.
        """
        plan = self._plan
        values = _row_values(row, len(plan.columns))

        converted: dict[str, Any] = {}
        for index, (raw, target) in enumerate(zip(values, plan.targets, strict=True)):
            if target is DISCARD:
                continue
            try:
                converted[target.name] = target.convert(raw)
            except (ValidationError, TypeError, ValueError) as e:
                raise ScanError(
                    index,
                    plan.columns[index],
                    f"{plan.descriptor.name}.{target.name}",
                    _error_detail(e),
                ) from e
        return converted

    def _column_index(self, name: str) -> int:
        targets = self._plan.targets
        for index in range(len(targets) - 1, -1, -1):
            if targets[index] is not DISCARD and targets[index].name == name:
                return index
        raise KeyError(name)

    def map_into(self, row: Any, record: Any) -> Any:
        """Write a row into an existing record instance.

        Assignment can still be refused after conversion (frozen Pydantic
        fields, assignment validators). Fields already written are then
        restored before the ScanError propagates.
        """
        values = self.convert(row)
        previous = {name: getattr(record, name, None) for name in values}
        written: list[str] = []
        for name, value in values.items():
            try:
                setattr(record, name, value)
            except (ValidationError, TypeError, ValueError, AttributeError) as e:
                for done in written:
                    object.__setattr__(record, done, previous[done])
                index = self._column_index(name)
                raise ScanError(
                    index,
                    self._plan.columns[index],
                    f"{self._plan.descriptor.name}.{name}",
                    _error_detail(e),
                ) from e
            written.append(name)
        return record

    def map_new(self, row: Any) -> Any:
        """Build a new record instance from a row."""
        return self._plan.descriptor.instantiate(self.convert(row))


def scan_scalars(row: Any, outs: Sequence[Out[Any]], columns: Sequence[str] = ()) -> None:
    """Positionally scan a row into Out slots.

    The number of columns must equal the number of slots. Slots are only
    written after every value converted successfully.

    Raises:
        ScanError: On a column count mismatch or a failed conversion.
    """
    if isinstance(row, dict):
        values = list(row.values())
    else:
        values = list(row)

    if len(values) != len(outs):
        raise ScanError(
            min(len(values), len(outs)),
            None,
            "Out",
            f"expected {len(outs)} destination arguments, got {len(values)} columns",
        )

    converted = []
    for index, (raw, out) in enumerate(zip(values, outs, strict=True)):
        try:
            converted.append(out.convert(raw))
        except (ValidationError, TypeError, ValueError) as e:
            name = columns[index] if index < len(columns) else None
            raise ScanError(index, name, out.target, _error_detail(e)) from e

    for out, value in zip(outs, converted, strict=True):
        out.value = value
