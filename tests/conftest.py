"""Shared test fixtures."""

import pytest

from namespaced_map import NamespacedStoreMap
from namespaced_map.stores import InMemoryStore


class SequenceTokens:
    """Token generator that hands out ``prefix0``, ``prefix1``, ..."""

    def __init__(self, prefix: str = "tok") -> None:
        self._prefix = prefix
        self._count = 0

    def generate(self) -> str:
        token = f"{self._prefix}{self._count}"
        self._count += 1
        return token


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def connector(store):
    opened = []

    def connect(host, port):
        opened.append((host, port))
        return store

    connect.opened = opened
    return connect


@pytest.fixture
def tokens():
    return SequenceTokens()


@pytest.fixture
def make_map(connector, tokens):
    def factory(**kwargs):
        kwargs.setdefault("connector", connector)
        kwargs.setdefault("token_generator", tokens)
        return NamespacedStoreMap(**kwargs)

    return factory
