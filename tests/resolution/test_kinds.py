from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import IntEnum, StrEnum
from typing import Annotated, Any, Literal, NamedTuple, NewType, Optional, TypedDict

import pytest
from sqlalchemy.orm import Mapped

from fieldresolver.resolution.kinds import (
    Float32,
    Float64,
    FloatWidth,
    Int8,
    Int16,
    Int32,
    Int64,
    IntWidth,
    Kind,
    TypeInfo,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)

UserId = NewType("UserId", int)
Email = NewType("Email", str)


class Name(str):
    pass


class Port(int):
    pass


class Color(StrEnum):
    RED = "red"


class Level(IntEnum):
    LOW = 1


class Point(NamedTuple):
    x: int
    y: int


class Payload(TypedDict):
    name: str


class IntList(list[int]):
    pass


@dataclass
class Item:
    name: str


@pytest.mark.parametrize(
    ("tp", "expected"),
    [
        (bool, Kind.BOOL),
        (Int8, Kind.INT8),
        (Int16, Kind.INT16),
        (Int32, Kind.INT32),
        (Int64, Kind.INT64),
        (int, Kind.INT64),
        (UInt8, Kind.UINT8),
        (UInt16, Kind.UINT16),
        (UInt32, Kind.UINT32),
        (UInt64, Kind.UINT64),
        (Float32, Kind.FLOAT32),
        (Float64, Kind.FLOAT64),
        (float, Kind.FLOAT64),
        (str, Kind.STRING),
    ],
)
def test_primitive_kinds(tp, expected):
    assert TypeInfo.create(tp).kind is expected
    assert expected.is_primitive


@pytest.mark.parametrize(
    ("tp", "expected"),
    [
        (Name, Kind.STRING),
        (Port, Kind.INT64),
        (Color, Kind.STRING),
        (Level, Kind.INT64),
        (UserId, Kind.INT64),
        (Email, Kind.STRING),
        (Mapped[Int8], Kind.INT8),
        (Annotated[Int32, "doc"], Kind.INT32),
        (Annotated[str, IntWidth(8)], Kind.STRING),
    ],
)
def test_derived_types_take_the_kind_of_their_base(tp, expected):
    assert TypeInfo.create(tp).kind is expected


@pytest.mark.parametrize(
    "tp",
    [bool | None, Optional[Int8], Item | None, list[str] | None, Mapped[datetime | None]],
)
def test_optionals_are_pointers(tp):
    assert TypeInfo.create(tp).kind is Kind.POINTER


@pytest.mark.parametrize(
    "tp",
    [list, list[int], tuple[int, ...], tuple[int, str], set[str], frozenset[int], IntList, bytes],
)
def test_containers_are_sequences(tp):
    assert TypeInfo.create(tp).kind is Kind.SEQUENCE


@pytest.mark.parametrize(
    "tp",
    [Item, datetime, timedelta, Point, Payload, dict[str, int]],
)
def test_other_classes_are_structs(tp):
    assert TypeInfo.create(tp).kind is Kind.STRUCT


@pytest.mark.parametrize("tp", [Any, object, int | str, Literal["a"], int | str | None])
def test_everything_else_is_other(tp):
    assert TypeInfo.create(tp).kind is Kind.OTHER


def test_type_info_keeps_width_in_identity():
    info = TypeInfo.create(Annotated[Mapped[Int8], "doc"])
    assert info.tp is int
    assert info.width == IntWidth(8)
    assert info.identity == Int8


def test_type_info_drops_width_that_does_not_fit_kind():
    info = TypeInfo.create(Annotated[str, FloatWidth(32)])
    assert info.width is None
    assert info.identity is str


def test_type_info_identity_of_plain_type_is_the_type():
    assert TypeInfo.create(Mapped[datetime]).identity is datetime


def test_type_info_pointee():
    assert TypeInfo.create(Int8 | None).pointee == Int8


def test_type_info_pointee_of_non_optional_raises():
    with pytest.raises(TypeError):
        _ = TypeInfo.create(int).pointee


def test_runtime_class_resolves_newtypes_and_generics():
    assert TypeInfo.create(UserId).runtime_class is int
    assert TypeInfo.create(list[int]).runtime_class is list


@pytest.mark.parametrize("bits", [0, 7, 128])
def test_int_width_rejects_unsupported_bits(bits):
    with pytest.raises(ValueError):
        IntWidth(bits)


def test_float_width_rejects_unsupported_bits():
    with pytest.raises(ValueError):
        FloatWidth(16)
