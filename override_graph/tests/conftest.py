from __future__ import annotations

import json
from collections.abc import Callable, Generator, Iterable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from loguru import logger

from override_graph import constants as cs
from override_graph.hierarchy import TypeHierarchy
from override_graph.models import MethodDecl, TypeDecl
from override_graph.resolution import OverrideResolver
from override_graph.types_defs import GraphData


class HierarchyBuilder:
    def __init__(self) -> None:
        self.hierarchy = TypeHierarchy()

    def _add(
        self,
        qualified_name: str,
        kind: cs.TypeKind,
        supertypes: Iterable[TypeDecl],
        methods: Iterable[str],
    ) -> TypeDecl:
        type_ = self.hierarchy.add_type(TypeDecl(qualified_name, kind))
        for name in methods:
            type_.add_method(name)
        for supertype in supertypes:
            self.hierarchy.add_supertype(type_, supertype)
        return type_

    def cls(
        self, qualified_name: str, *supertypes: TypeDecl, methods: Iterable[str] = ()
    ) -> TypeDecl:
        return self._add(qualified_name, cs.TypeKind.CLASS, supertypes, methods)

    def iface(
        self, qualified_name: str, *supertypes: TypeDecl, methods: Iterable[str] = ()
    ) -> TypeDecl:
        return self._add(qualified_name, cs.TypeKind.INTERFACE, supertypes, methods)

    def method(self, type_: TypeDecl, name: str) -> MethodDecl:
        method = next((m for m in type_.get_methods() if m.name == name), None)
        assert method is not None, f"{type_}.{name} not declared"
        return method

    def resolver(self, **kwargs: Any) -> OverrideResolver:
        return OverrideResolver(self.hierarchy, **kwargs)


logger.remove()


@pytest.fixture
def builder() -> HierarchyBuilder:
    return HierarchyBuilder()


@pytest.fixture
def animal_builder(builder: HierarchyBuilder) -> HierarchyBuilder:
    """Animal.speak <- Dog.speak <- Puppy.speak"""
    animal = builder.cls("zoo.Animal", methods=["speak", "eat"])
    dog = builder.cls("zoo.Dog", animal, methods=["speak", "fetch"])
    builder.cls("zoo.Puppy", dog, methods=["speak"])
    return builder


@pytest.fixture
def methods_scanned() -> Generator[list[str], None, None]:
    """Records the qualified name of every type whose methods are read."""
    scanned: list[str] = []
    original = TypeDecl.get_methods

    def record(self: TypeDecl) -> tuple[MethodDecl, ...]:
        scanned.append(self.qualified_name)
        return original(self)

    with patch.object(TypeDecl, "get_methods", autospec=True, side_effect=record):
        yield scanned


@pytest.fixture
def log_messages() -> Generator[list[str], None, None]:
    """Capture log messages using a custom sink."""
    messages: list[str] = []

    def sink(message: Any) -> None:
        messages.append(str(message))

    handler_id = logger.add(sink, format="{message}", level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def mock_ingestor() -> MagicMock:
    return MagicMock()


def create_type_graph() -> GraphData:
    """Animal <- Dog <- Puppy, with Dog also implementing Pet."""
    return {
        "nodes": [
            {
                "node_id": 1,
                "labels": ["Class"],
                "properties": {"name": "Animal", "qualified_name": "zoo.Animal"},
            },
            {
                "node_id": 2,
                "labels": ["Class"],
                "properties": {"name": "Dog", "qualified_name": "zoo.Dog"},
            },
            {
                "node_id": 3,
                "labels": ["Class"],
                "properties": {"name": "Puppy", "qualified_name": "zoo.Puppy"},
            },
            {
                "node_id": 4,
                "labels": ["Interface"],
                "properties": {"name": "Pet", "qualified_name": "zoo.Pet"},
            },
            {
                "node_id": 10,
                "labels": ["Method"],
                "properties": {
                    "name": "speak",
                    "qualified_name": "zoo.Animal.speak",
                    "modifiers": ["public"],
                },
            },
            {
                "node_id": 11,
                "labels": ["Method"],
                "properties": {
                    "name": "Animal",
                    "qualified_name": "zoo.Animal.Animal",
                    "is_constructor": True,
                },
            },
            {
                "node_id": 20,
                "labels": ["Method"],
                "properties": {
                    "name": "speak",
                    "qualified_name": "zoo.Dog.speak",
                    "modifiers": ["public"],
                },
            },
            {
                "node_id": 21,
                "labels": ["Method"],
                "properties": {
                    "name": "create",
                    "qualified_name": "zoo.Dog.create",
                    "modifiers": ["public", "static"],
                },
            },
            {
                "node_id": 30,
                "labels": ["Method"],
                "properties": {
                    "name": "speak",
                    "qualified_name": "zoo.Puppy.speak",
                    "modifiers": ["public", "@Override"],
                    "parameters": ["int volume"],
                },
            },
            {
                "node_id": 40,
                "labels": ["Method"],
                "properties": {
                    "name": "speak",
                    "qualified_name": "zoo.Pet.speak",
                    "modifiers": ["abstract"],
                },
            },
        ],
        "relationships": [
            {"from_id": 1, "to_id": 10, "type": "DEFINES_METHOD", "properties": {}},
            {"from_id": 1, "to_id": 11, "type": "DEFINES_METHOD", "properties": {}},
            {"from_id": 2, "to_id": 20, "type": "DEFINES_METHOD", "properties": {}},
            {"from_id": 2, "to_id": 21, "type": "DEFINES_METHOD", "properties": {}},
            {"from_id": 3, "to_id": 30, "type": "DEFINES_METHOD", "properties": {}},
            {"from_id": 4, "to_id": 40, "type": "DEFINES_METHOD", "properties": {}},
            {"from_id": 2, "to_id": 4, "type": "IMPLEMENTS", "properties": {}},
            {"from_id": 2, "to_id": 1, "type": "INHERITS", "properties": {}},
            {"from_id": 3, "to_id": 2, "type": "INHERITS", "properties": {}},
        ],
        "metadata": {
            "total_nodes": 10,
            "total_relationships": 9,
            "exported_at": "2025-01-01T00:00:00Z",
        },
    }


@pytest.fixture
def write_graph(tmp_path: Path) -> Callable[[GraphData], Path]:
    def _write(data: GraphData, name: str = "graph.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def type_graph_file(write_graph: Callable[[GraphData], Path]) -> Path:
    return write_graph(create_type_graph())
