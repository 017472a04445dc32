from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple, Protocol, TypedDict, runtime_checkable

from .constants import MethodFlag, TypeKind

PropertyValue = str | int | float | bool | list[str] | None
PropertyDict = dict[str, PropertyValue]

QualifiedName = str


@runtime_checkable
class TypeProtocol(Protocol):
    @property
    def qualified_name(self) -> QualifiedName: ...

    @property
    def kind(self) -> TypeKind: ...

    def get_methods(self) -> Sequence[MethodProtocol]: ...


@runtime_checkable
class MethodProtocol(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def flags(self) -> frozenset[MethodFlag]: ...

    @property
    def is_constructor(self) -> bool: ...

    @property
    def declaring_type(self) -> TypeProtocol | None: ...

    @property
    def qualified_name(self) -> QualifiedName: ...


@runtime_checkable
class TypeHierarchyProtocol(Protocol):
    def get_supertypes(self, type_: TypeProtocol) -> Sequence[TypeProtocol]: ...


@runtime_checkable
class VisibilityCheckerProtocol(Protocol):
    def is_visible(
        self, method: MethodProtocol, context: TypeProtocol | None
    ) -> bool: ...


class OverrideEdge(NamedTuple):
    method: MethodProtocol
    overridden: MethodProtocol


class GraphMetadata(TypedDict, total=False):
    total_nodes: int
    total_relationships: int
    exported_at: str


class NodeData(TypedDict):
    node_id: int
    labels: list[str]
    properties: dict[str, PropertyValue]


class RelationshipData(TypedDict):
    from_id: int
    to_id: int
    type: str
    properties: dict[str, PropertyValue]


class GraphData(TypedDict):
    nodes: list[NodeData]
    relationships: list[RelationshipData]
    metadata: GraphMetadata


class GraphSummary(TypedDict):
    total_nodes: int
    total_relationships: int
    node_labels: dict[str, int]
    relationship_types: dict[str, int]
    metadata: GraphMetadata
