from dataclasses import dataclass, field
from datetime import timedelta
from typing import ClassVar

import attr
import pytest
from pydantic import BaseModel
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from fieldresolver.resolution.destinations import (
    UNSET,
    Destination,
    FieldDestination,
    Slot,
    field_destinations,
)
from fieldresolver.resolution.exceptions import UnsupportedConversionError
from fieldresolver.resolution.kinds import Int32


@dataclass
class Query:
    limit: Int32 = 20
    timeout: timedelta | None = None
    tags: list[str] = field(default_factory=list)
    verbose: bool = False

    MAX_LIMIT: ClassVar[int] = 100
    _cursor: str | None = None


@dataclass
class PagedQuery(Query):
    page: int = 1


@attr.define
class AttrsQuery:
    limit: Int32 = 20
    verbose: bool = False


class ModelQuery(BaseModel):
    limit: Int32 = 20
    verbose: bool = False


class Plain:
    limit: Int32
    verbose: bool = False


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str]
    nickname: Mapped[str | None]


def test_slot_starts_unset():
    slot = Slot(int)
    assert slot.get() is UNSET
    assert slot.tp is int
    assert isinstance(slot, Destination)


def test_slot_stores_values():
    slot = Slot(int, value=1)
    slot.set(2)
    assert slot.get() == 2
    assert slot.value == 2


def test_field_destination_reads_declared_type():
    destination = FieldDestination(Query(), "limit")
    assert destination.tp == Int32
    assert destination.name == "limit"
    assert destination.get() == 20
    assert isinstance(destination, Destination)


def test_field_destination_finds_inherited_fields():
    assert FieldDestination(PagedQuery(), "timeout").tp == timedelta | None


def test_field_destination_of_unset_attribute_is_unset():
    assert FieldDestination(Plain(), "limit").get() is UNSET


def test_field_destination_rejects_unknown_fields():
    with pytest.raises(AttributeError):
        FieldDestination(Query(), "offset")


def test_field_destinations_skip_classvars_and_private_fields():
    names = [destination.name for destination in field_destinations(PagedQuery())]
    assert names == ["limit", "timeout", "tags", "verbose", "page"]


@pytest.mark.parametrize("owner_cls", [Query, AttrsQuery, ModelQuery, Plain])
def test_resolves_into_fields(resolver, owner_cls):
    owner = owner_cls()
    resolver.resolve_value(FieldDestination(owner, "limit"), "50")
    resolver.resolve_value(FieldDestination(owner, "verbose"), "true")
    assert owner.limit == 50
    assert owner.verbose is True


def test_failed_resolution_leaves_field_unchanged(resolver):
    query = Query()
    with pytest.raises(UnsupportedConversionError):
        resolver.resolve_value(FieldDestination(query, "limit"), "5000000000")
    assert query.limit == 20


def test_resolves_every_field_of_a_query(resolver):
    query = Query()
    values = {"limit": "50", "timeout": "1m30s", "tags": ["a", "b"], "verbose": "t"}
    for destination in field_destinations(query):
        if destination.name in values:
            resolver.resolve_value(destination, values[destination.name])
    assert query == Query(
        limit=50, timeout=timedelta(seconds=90), tags=["a", "b"], verbose=True
    )


def test_resolves_into_sqlalchemy_mapped_attributes(resolver):
    user = User()
    resolver.resolve_value(FieldDestination(user, "id"), "42")
    resolver.resolve_value(FieldDestination(user, "name"), "ada")
    resolver.resolve_value(FieldDestination(user, "nickname"), None)
    assert user.id == 42
    assert user.name == "ada"
    assert user.nickname is None
