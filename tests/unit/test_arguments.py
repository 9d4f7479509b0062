"""Unit tests for call argument classification."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from row_scan.core.arguments import explicit_args, split_args, split_last
from row_scan.core.exceptions import InvalidArgumentsError, MissingDestinationError
from row_scan.mapping.destination import Out, Rows


@dataclass
class User:
    id: int = 0
    name: str = ""
    email: str = ""


class TestSplitArgs:
    def test_scalar_destinations(self) -> None:
        id_, name, email = Out(int), Out(str), Out(str)
        params, dests = split_args(("alice@example.com", id_, name, email))
        assert params == ("alice@example.com",)
        assert dests == (id_, name, email)

    def test_record_destination(self) -> None:
        user = User()
        params, dests = split_args(("alice@example.com", user))
        assert params == ("alice@example.com",)
        assert dests == (user,)

    def test_no_params(self) -> None:
        user = User()
        params, dests = split_args((user,))
        assert params == ()
        assert dests[0] is user

    def test_rows_counts_as_destination(self) -> None:
        users = Rows(User)
        params, dests = split_args((1, 2, users))
        assert params == (1, 2)
        assert dests[0] is users

    def test_plain_list_is_a_parameter(self) -> None:
        out = Out()
        params, _ = split_args(([1, 2], out))
        assert params == ([1, 2],)

    def test_zero_args(self) -> None:
        with pytest.raises(MissingDestinationError):
            split_args(())

    def test_no_destination(self) -> None:
        with pytest.raises(InvalidArgumentsError, match="no destination"):
            split_args(("alice@example.com", 42))

    def test_value_after_destination(self) -> None:
        with pytest.raises(InvalidArgumentsError, match="output references"):
            split_args(("alice@example.com", Out(), "trailing"))


class TestSplitLast:
    def test_last_argument_is_destination(self) -> None:
        users = Rows(User)
        params, dest = split_last(("a", "b", users))
        assert params == ("a", "b")
        assert dest is users

    def test_destination_only(self) -> None:
        users = Rows(User)
        assert split_last((users,)) == ((), users)

    def test_zero_args(self) -> None:
        with pytest.raises(MissingDestinationError, match="fetch_all"):
            split_last(())


class TestExplicitArgs:
    def test_record_shaped_parameter(self) -> None:
        # A record passed as a parameter is only possible with explicit params
        param = User(id=9)
        dest = Out()
        params, dests = explicit_args([param], [dest])
        assert params == (param,)
        assert dests == (dest,)

    def test_missing_destination(self) -> None:
        with pytest.raises(MissingDestinationError):
            explicit_args(["a"], [])

    def test_non_reference_destination(self) -> None:
        with pytest.raises(InvalidArgumentsError):
            explicit_args(["a"], ["b"])

    def test_string_params_rejected(self) -> None:
        with pytest.raises(InvalidArgumentsError, match="sequence"):
            explicit_args("alice@example.com", [Out()])
