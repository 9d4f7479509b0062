"""Call argument classification.

Splits the variadic arguments of a fetch call into query parameters and
output destinations. The first output reference starts the destination
run, so parameters can never follow a destination:

    ("alice@example.com", id_, name, email) -> params ("alice@example.com",),
                                               dests (id_, name, email)

Passing ``params=`` explicitly to the engine skips the inference, which is
the safer form when a parameter value could itself look like a record.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from row_scan.core.exceptions import InvalidArgumentsError, MissingDestinationError
from row_scan.mapping.destination import is_reference


def _check_dests(dests: Sequence[Any]) -> None:
    if not dests:
        raise InvalidArgumentsError("destination run is empty")
    for position, dest in enumerate(dests):
        if not is_reference(dest):
            raise InvalidArgumentsError(
                f"destinations must be output references: argument {position} of the "
                f"destination run is {type(dest).__name__}"
            )


def split_args(
    args: Sequence[Any],
    operation: str = "fetch_one",
) -> tuple[tuple[Any, ...], tuple[Any, ...]]:
    """Split args at the first output reference.

    Returns:
        Tuple of (params, dests).

    Raises:
        MissingDestinationError: If args is empty.
        InvalidArgumentsError: If there is no output reference, or a value
            follows the first one.
    """
    if not args:
        raise MissingDestinationError(operation)

    for index, arg in enumerate(args):
        if is_reference(arg):
            params, dests = tuple(args[:index]), tuple(args[index:])
            _check_dests(dests)
            return params, dests

    raise InvalidArgumentsError(
        f"{operation} found no destination among {len(args)} argument(s); "
        "pass Out slots, a record instance, or Rows(RecordType)"
    )


def split_last(
    args: Sequence[Any],
    operation: str = "fetch_all",
) -> tuple[tuple[Any, ...], Any]:
    """Split args into (params, dest) where dest is the last argument.

    Raises:
        MissingDestinationError: If args is empty.
    """
    if not args:
        raise MissingDestinationError(operation)
    return tuple(args[:-1]), args[-1]


def explicit_args(
    params: Sequence[Any],
    dests: Sequence[Any],
    operation: str = "fetch_one",
) -> tuple[tuple[Any, ...], tuple[Any, ...]]:
    """Validate an explicit (params, dests) pair.

    Raises:
        MissingDestinationError: If dests is empty.
        InvalidArgumentsError: If params is a bare string or any dest is not
            an output reference.
    """
    if isinstance(params, (str, bytes)):
        raise InvalidArgumentsError("params must be a sequence of values, not a string")
    if not dests:
        raise MissingDestinationError(operation)
    _check_dests(dests)
    return tuple(params), tuple(dests)
