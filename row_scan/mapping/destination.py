"""Output destinations and destination shape detection.

Python has no pointers, so output references are explicit objects:

* ``Out`` - a writable scalar slot
* a dataclass or Pydantic model instance - a single record, written in place
* ``Rows(RecordType)`` - a growable list that receives one record per row
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any, Generic, TypeVar

from row_scan.core.exceptions import UnsupportedDestinationError
from row_scan.mapping.descriptor import describe, is_record, is_record_type, type_adapter

T = TypeVar("T")

_UNSET: Any = object()


class Out(Generic[T]):
    """Writable scalar slot.

    Args:
        type_: Optional declared type. Scanned values are validated against
            it (``int``, ``str``, ``datetime``, ``int | None``, ...).
        value: Initial value, left untouched until a scan succeeds.
    """

    __slots__ = ("type_", "value", "_adapter")

    def __init__(self, type_: Any = None, value: Any = None) -> None:
        self.type_ = type_
        self.value = value
        self._adapter = type_adapter(type_) if type_ is not None else None

    def convert(self, raw: Any) -> Any:
        if self._adapter is None:
            return raw
        return self._adapter.validate_python(raw)

    @property
    def target(self) -> str:
        return f"Out[{getattr(self.type_, '__name__', self.type_)}]" if self.type_ else "Out"

    def __repr__(self) -> str:
        return f"{self.target}({self.value!r})"


class Rows(list, Generic[T]):  # type: ignore[type-arg]
    """List destination for multi-row queries.

    The element type must be a dataclass or Pydantic model; fetch_all
    appends one new instance per fetched row.
    """

    def __init__(self, record_type: type[T], iterable: Any = ()) -> None:
        super().__init__(iterable)
        self.record_type = record_type

    def __repr__(self) -> str:
        return f"Rows[{self.record_type.__name__}]({list.__repr__(self)})"


class DestinationShape(Enum):
    """Mapping strategy selected by the final destination argument."""

    SCALAR_LIST = "scalar_list"
    SINGLE_RECORD = "single_record"
    RECORD_SEQUENCE = "record_sequence"


def is_reference(arg: Any) -> bool:
    """Check if arg is an output reference rather than a query parameter."""
    return isinstance(arg, (Out, Rows)) or is_record(arg)


def detect_shape(dests: Sequence[Any]) -> DestinationShape:
    """Classify a destination run by its last element.

    Raises:
        UnsupportedDestinationError: If the run matches none of the shapes.
    """
    if not dests:
        raise UnsupportedDestinationError(None, "empty destination run")

    last = dests[-1]

    if isinstance(last, Out):
        for dest in dests:
            if not isinstance(dest, Out):
                raise UnsupportedDestinationError(
                    dest, "scalar destinations cannot be mixed with other destinations"
                )
        return DestinationShape.SCALAR_LIST

    if len(dests) > 1:
        raise UnsupportedDestinationError(
            last, "a record or record sequence must be the only destination"
        )

    if isinstance(last, Rows):
        if not is_record_type(last.record_type):
            raise UnsupportedDestinationError(
                last, f"element type {last.record_type!r} is not a dataclass or Pydantic model"
            )
        return DestinationShape.RECORD_SEQUENCE

    if is_record(last):
        if describe(type(last)).frozen:
            raise UnsupportedDestinationError(last, "frozen records cannot be written in place")
        return DestinationShape.SINGLE_RECORD

    raise UnsupportedDestinationError(
        last, "expected Out slots, a record instance, or Rows(RecordType)"
    )
