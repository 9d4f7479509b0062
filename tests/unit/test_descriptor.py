"""Unit tests for record descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated

import pytest
from pydantic import BaseModel, ConfigDict, Field

from row_scan.core.exceptions import MappingError
from row_scan.mapping.descriptor import (
    Column,
    RecordKind,
    describe,
    is_record,
    is_record_type,
    record,
    type_adapter,
)


@dataclass
class User:
    id: int
    name: str
    email: str = "unknown"


@dataclass
class Aliased:
    user_id: Annotated[int, Column("ID")]
    full_name: str = field(default="", metadata={"column": "name"})
    tags: list[str] = field(default_factory=list)


@record(columns={"email": "user_email"})
@dataclass
class Registered:
    id: int = 0
    email: str = ""


@dataclass(frozen=True)
class Point:
    x: int
    y: int


class UserModel(BaseModel):
    id: int
    name: str = "anon"
    email: str = Field(default="", alias="email_address")


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int


class TestDescribe:
    def test_dataclass_positions_follow_declaration_order(self) -> None:
        descriptor = describe(User)
        assert descriptor.kind is RecordKind.DATACLASS
        assert [f.name for f in descriptor.fields] == ["id", "name", "email"]
        assert [f.position for f in descriptor.fields] == [0, 1, 2]
        assert len(descriptor) == 3

    def test_descriptor_is_cached(self) -> None:
        assert describe(User) is describe(User)

    def test_annotated_column_alias(self) -> None:
        user_id = describe(Aliased).fields[0]
        assert user_id.alias == "ID"
        assert user_id.convert("7") == 7

    def test_field_metadata_alias(self) -> None:
        assert describe(Aliased).fields[1].alias == "name"

    def test_registered_column_map(self) -> None:
        fields = describe(Registered).fields
        assert fields[0].alias is None
        assert fields[1].alias == "user_email"

    def test_unknown_field_in_column_map(self) -> None:
        @record(columns={"missing": "col"})
        @dataclass
        class Broken:
            id: int = 0

        with pytest.raises(MappingError, match="missing"):
            describe(Broken)

    def test_pydantic_alias(self) -> None:
        descriptor = describe(UserModel)
        assert descriptor.kind is RecordKind.PYDANTIC
        assert [f.alias for f in descriptor.fields] == [None, None, "email_address"]

    def test_frozen_records(self) -> None:
        assert describe(Point).frozen is True
        assert describe(FrozenModel).frozen is True
        assert describe(User).frozen is False

    def test_not_a_record(self) -> None:
        with pytest.raises(MappingError):
            describe(int)


class TestInstantiate:
    def test_defaults_fill_unmapped_fields(self) -> None:
        user = describe(User).instantiate({"id": 1})
        assert user == User(id=1, name=None, email="unknown")  # type: ignore[arg-type]

    def test_default_factory(self) -> None:
        first = describe(Aliased).instantiate({"user_id": 1})
        second = describe(Aliased).instantiate({"user_id": 2})
        assert first.tags == []
        assert first.tags is not second.tags

    def test_pydantic_instantiate(self) -> None:
        user = describe(UserModel).instantiate({"id": 3, "email": "c@example.com"})
        assert isinstance(user, UserModel)
        assert user.id == 3
        assert user.name == "anon"
        assert user.email == "c@example.com"

    def test_pydantic_required_field_left_none(self) -> None:
        user = describe(UserModel).instantiate({"name": "Dana"})
        assert user.id is None
        assert user.name == "Dana"


class TestTypeAdapter:
    def test_shared_per_type(self) -> None:
        assert type_adapter(int) is type_adapter(int)
        assert type_adapter(int | None) is type_adapter(int | None)

    def test_field_adapters_reuse_shared_instance(self) -> None:
        (id_field, *_) = describe(User).fields
        assert id_field.adapter is type_adapter(int)


class TestRecordChecks:
    def test_is_record_type(self) -> None:
        assert is_record_type(User)
        assert is_record_type(UserModel)
        assert not is_record_type(dict)
        assert not is_record_type(User(1, "a"))

    def test_is_record(self) -> None:
        assert is_record(User(1, "a"))
        assert is_record(UserModel(id=1))
        assert not is_record(User)
        assert not is_record("alice@example.com")
