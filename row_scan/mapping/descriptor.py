"""Record descriptors.

A RecordDescriptor is the ordered field metadata of one record type
(a dataclass or a Pydantic model). It is built once per type by
``describe`` and never mutated afterwards.

Column aliases are looked up in this order:
1. ``Annotated[T, Column("col")]`` on the field annotation
2. dataclass ``field(metadata={"column": "col"})``
3. Pydantic ``Field(alias="col")``
4. ``@record(columns={"field": "col"})`` on the class
"""

from __future__ import annotations

import dataclasses
import typing
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, get_args, get_origin

from pydantic import BaseModel, TypeAdapter

from row_scan.core.exceptions import MappingError

_MISSING: Any = dataclasses.MISSING


@dataclass(frozen=True)
class Column:
    """Column name annotation for a record field."""

    name: str


def record(
    cls: type | None = None,
    *,
    columns: dict[str, str] | None = None,
) -> Any:
    """Register explicit column aliases for a record type.

    Args:
        cls: The dataclass or Pydantic model being decorated.
        columns: Field name -> column name mapping.
    """

    def decorator(cls: type) -> type:
        cls.__column_map__ = dict(columns or {})  # type: ignore[attr-defined]
        return cls

    if cls is not None:
        return decorator(cls)
    return decorator


class RecordKind(Enum):
    DATACLASS = "dataclass"
    PYDANTIC = "pydantic"


@dataclass(frozen=True)
class FieldDescriptor:
    """Metadata for one writable field of a record type."""

    position: int
    name: str
    alias: str | None
    annotation: Any
    default: Any = _MISSING
    default_factory: Any = _MISSING
    init: bool = True
    adapter: TypeAdapter[Any] | None = field(default=None, compare=False, repr=False)

    def convert(self, value: Any) -> Any:
        """Validate a raw column value against the field's declared type."""
        if self.adapter is None:
            return value
        return self.adapter.validate_python(value)

    @property
    def has_default(self) -> bool:
        return self.default is not _MISSING or self.default_factory is not _MISSING

    def default_value(self) -> Any:
        """Value for a field that no column was mapped to."""
        if self.default is not _MISSING:
            return self.default
        if self.default_factory is not _MISSING:
            return self.default_factory()
        return None


@dataclass(frozen=True)
class RecordDescriptor:
    """Ordered field descriptors for a single record type."""

    record_type: type
    kind: RecordKind
    fields: tuple[FieldDescriptor, ...]
    frozen: bool = False

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def name(self) -> str:
        return self.record_type.__name__

    def instantiate(self, values: dict[str, Any]) -> Any:
        """Create a new record from already-converted values.

        Fields missing from ``values`` get their default, or None.
        """
        if self.kind is RecordKind.PYDANTIC:
            # model_construct copies declared defaults itself
            full = dict(values)
            for f in self.fields:
                if f.name not in full and not f.has_default:
                    full[f.name] = None
            return self.record_type.model_construct(**full)  # type: ignore[attr-defined]

        full = {
            f.name: values[f.name] if f.name in values else f.default_value()
            for f in self.fields
        }

        init_kwargs = {f.name: full[f.name] for f in self.fields if f.init}
        instance = self.record_type(**init_kwargs)
        for f in self.fields:
            if not f.init:
                object.__setattr__(instance, f.name, full[f.name])
        return instance


@lru_cache(maxsize=512)
def _cached_adapter(annotation: Any) -> TypeAdapter[Any]:
    return TypeAdapter(annotation)


def type_adapter(annotation: Any) -> TypeAdapter[Any]:
    """Shared TypeAdapter for an annotation, built once per hashable type."""
    try:
        return _cached_adapter(annotation)
    except TypeError:
        # unhashable annotation metadata
        return TypeAdapter(annotation)


def _adapter(annotation: Any) -> TypeAdapter[Any] | None:
    if annotation is Any or isinstance(annotation, str):
        return None
    return type_adapter(annotation)


def _column_marker(metadata: typing.Iterable[Any]) -> str | None:
    for item in metadata:
        if isinstance(item, Column):
            return item.name
    return None


def is_record_type(tp: Any) -> bool:
    """Check if tp is a record type (a dataclass or a Pydantic model class)."""
    if not isinstance(tp, type):
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def is_record(obj: Any) -> bool:
    """Check if obj is a record instance."""
    return not isinstance(obj, type) and is_record_type(type(obj))


def _describe_dataclass(cls: type, column_map: dict[str, str]) -> RecordDescriptor:
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError):
        hints = {}

    descriptors = []
    for position, f in enumerate(dataclasses.fields(cls)):
        annotation = hints.get(f.name, Any)
        alias = None
        if get_origin(annotation) is Annotated:
            alias = _column_marker(get_args(annotation)[1:])
        if alias is None:
            alias = f.metadata.get("column")
        if alias is None:
            alias = column_map.get(f.name)

        descriptors.append(
            FieldDescriptor(
                position=position,
                name=f.name,
                alias=alias,
                annotation=annotation,
                default=f.default,
                default_factory=f.default_factory,
                init=f.init,
                adapter=_adapter(annotation),
            )
        )

    params = getattr(cls, "__dataclass_params__", None)
    return RecordDescriptor(
        record_type=cls,
        kind=RecordKind.DATACLASS,
        fields=tuple(descriptors),
        frozen=bool(params is not None and params.frozen),
    )


def _describe_pydantic(cls: type[BaseModel], column_map: dict[str, str]) -> RecordDescriptor:
    descriptors = []
    for position, (name, info) in enumerate(cls.model_fields.items()):
        alias = _column_marker(info.metadata)
        if alias is None:
            alias = info.alias
        if alias is None and isinstance(info.validation_alias, str):
            alias = info.validation_alias
        if alias is None:
            alias = column_map.get(name)

        default = _MISSING if info.is_required() or info.default_factory else info.default
        descriptors.append(
            FieldDescriptor(
                position=position,
                name=name,
                alias=alias,
                annotation=info.annotation,
                default=default,
                default_factory=info.default_factory or _MISSING,
                adapter=_adapter(info.annotation),
            )
        )

    return RecordDescriptor(
        record_type=cls,
        kind=RecordKind.PYDANTIC,
        fields=tuple(descriptors),
        frozen=bool(cls.model_config.get("frozen", False)),
    )


@lru_cache(maxsize=None)
def describe(cls: type) -> RecordDescriptor:
    """Build (once) the RecordDescriptor for a dataclass or Pydantic model.

    Raises:
        MappingError: If cls is not a record type, or its explicit column
            map names a field that does not exist.
    """
    if not is_record_type(cls):
        raise MappingError(f"{cls!r} is not a dataclass or Pydantic model")

    column_map: dict[str, str] = getattr(cls, "__column_map__", {})
    if issubclass(cls, BaseModel):
        descriptor = _describe_pydantic(cls, column_map)
    else:
        descriptor = _describe_dataclass(cls, column_map)

    unknown = set(column_map) - {f.name for f in descriptor.fields}
    if unknown:
        raise MappingError(
            f"Column map for {cls.__name__} names unknown fields: {sorted(unknown)}"
        )
    return descriptor
