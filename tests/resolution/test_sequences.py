import pytest

from fieldresolver.resolution.destinations import UNSET, Slot
from fieldresolver.resolution.exceptions import UnsupportedConversionError
from fieldresolver.resolution.kinds import Float32, Int8, Int32, Int64, TypeInfo, UInt8
from fieldresolver.resolution.sequences import SequenceResolver

from tests.resolution.conftest import Item


class IntList(list[int]):
    pass


@pytest.mark.parametrize(
    ("tp", "value"),
    [
        (list[int], [1, 2, 3]),
        (list[int], []),
        (list[Int32], []),
        (list[Int32], [1, 2, 3]),
        (list[UInt8], [0, 255]),
        (list[Float32], [0.5, 2.0]),
        (tuple[Int8, str], (5, "a")),
        (list[str], ["test"]),
        (list[Item], [Item("a", 1)]),
        (list, [1, "a", None]),
        (tuple[int, ...], (1, 2, 3)),
        (tuple[int, str], (1, "a")),
        (set[str], {"a", "b"}),
        (frozenset[int], frozenset({1})),
        (IntList, IntList([1, 2])),
        (bytes, b"abc"),
        (bytearray, bytearray(b"abc")),
    ],
)
def test_matching_sequences_are_accepted(tp, value):
    assert SequenceResolver().matches(TypeInfo.create(tp), value)


@pytest.mark.parametrize(
    ("tp", "value"),
    [
        (list[int], ["1", "2"]),
        (list[int], [True]),
        (list[int], (1, 2)),
        (list[Int8], [1, 500]),
        (list[UInt8], [-1]),
        (list[Int32], [True]),
        (list[Float32], [0.1]),
        (list[Item], ["trick"]),
        (tuple[int, str], (1, 2)),
        (tuple[int, str], (1,)),
        (set[str], ["a"]),
        (IntList, [1, 2]),
        (bytes, bytearray(b"abc")),
        (list[str], "test"),
    ],
)
def test_mismatching_sequences_are_rejected(tp, value):
    assert not SequenceResolver().matches(TypeInfo.create(tp), value)


def test_non_sequence_destinations_never_match():
    assert not SequenceResolver().matches(TypeInfo.create(str), "abc")


def test_declared_element_type_must_equal_destination_element_type():
    resolver = SequenceResolver()
    target = TypeInfo.create(list[Int32])
    assert resolver.matches(target, [1, 2, 3], source_tp=list[Int32])
    assert not resolver.matches(target, [1, 2, 3], source_tp=list[Int64])
    assert not resolver.matches(target, [1, 2, 3], source_tp=list[int])


def test_declared_container_must_equal_destination_container():
    target = TypeInfo.create(list[int])
    assert not SequenceResolver().matches(target, [1], source_tp=tuple[int, ...])


def test_exact_slice_type_resolves(resolver):
    slot = Slot(list[Int32])
    value = [1, 2, 3]
    resolver.resolve_value(slot, value, source_tp=list[Int32])
    assert slot.value is value


def test_width_marked_elements_resolve_like_scalars(resolver):
    scalar = Slot(Int32)
    resolver.resolve_value(scalar, 1)
    slot = Slot(list[Int32])
    value = [1, 2, 3]
    resolver.resolve_value(slot, value)
    assert scalar.value == 1
    assert slot.value is value


def test_out_of_range_element_fails(resolver):
    slot = Slot(list[Int8])
    with pytest.raises(UnsupportedConversionError):
        resolver.resolve_value(slot, [1, 500])
    assert slot.value is UNSET


def test_slice_of_other_element_type_fails(resolver):
    slot = Slot(list[Int64])
    with pytest.raises(UnsupportedConversionError):
        resolver.resolve_value(slot, [1, 2, 3], source_tp=list[Int32])
    assert slot.value is UNSET


def test_elements_are_never_converted_one_by_one(resolver):
    slot = Slot(list[int])
    with pytest.raises(UnsupportedConversionError):
        resolver.resolve_value(slot, ["1", "2"])
    assert slot.value is UNSET


def test_optional_sequence_resolves_through_pointer(resolver):
    slot = Slot(list[int] | None)
    resolver.resolve_value(slot, [1, 2])
    assert slot.value == [1, 2]
