import ipaddress
from dataclasses import dataclass
from typing import Self

import pytest

from fieldresolver.resolution.resolver import ValueResolver
from fieldresolver.resolution.text import TextUnmarshalerReflectResolver
from fieldresolver.resolution.times import DurationTypeResolver, TimeTypeResolver


class IP(bytes):
    """A 16-byte address that parses itself from dotted or colon notation."""

    @classmethod
    def from_text(cls, text: str) -> Self:
        address = ipaddress.ip_address(text)
        if isinstance(address, ipaddress.IPv4Address):
            address = ipaddress.IPv6Address(f"::ffff:{address}")
        return cls(address.packed)


class RawIP(bytes):
    """A bytes subclass that knows nothing about text."""


@dataclass
class Item:
    name: str
    count: int


@pytest.fixture
def resolver() -> ValueResolver:
    return ValueResolver(
        TimeTypeResolver(),
        DurationTypeResolver(),
        TextUnmarshalerReflectResolver(),
    )


@pytest.fixture
def plain_resolver() -> ValueResolver:
    return ValueResolver()
