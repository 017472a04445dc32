from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .constants import SEPARATOR_DOT, MethodFlag, TypeKind
from .types_defs import PropertyValue


@dataclass
class GraphNode:
    node_id: int
    labels: list[str]
    properties: dict[str, PropertyValue]


@dataclass
class GraphRelationship:
    from_id: int
    to_id: int
    type: str
    properties: dict[str, PropertyValue]


@dataclass(frozen=True)
class TypeDecl:
    """A class or interface. Identity is its qualified name and kind.

    Declared methods are kept in declaration order and take no part in
    equality or hashing, so a type can be used as a visited-set key while its
    methods are still being attached.
    """

    qualified_name: str
    kind: TypeKind = TypeKind.CLASS
    methods: list[MethodDecl] = field(
        default_factory=list, compare=False, hash=False, repr=False
    )

    @property
    def name(self) -> str:
        return self.qualified_name.rsplit(SEPARATOR_DOT, 1)[-1]

    @property
    def is_interface(self) -> bool:
        return self.kind == TypeKind.INTERFACE

    def get_methods(self) -> tuple[MethodDecl, ...]:
        return tuple(self.methods)

    def add_method(
        self,
        name: str,
        flags: Iterable[MethodFlag] = (),
        is_constructor: bool = False,
        parameters: Iterable[str] = (),
    ) -> MethodDecl:
        method = MethodDecl(
            name=name,
            declaring_type=self,
            flags=frozenset(flags),
            is_constructor=is_constructor,
            parameters=tuple(parameters),
        )
        self.methods.append(method)
        return method

    def __str__(self) -> str:
        return self.qualified_name


@dataclass(frozen=True)
class MethodDecl:
    name: str
    declaring_type: TypeDecl | None
    flags: frozenset[MethodFlag] = frozenset()
    is_constructor: bool = False
    parameters: tuple[str, ...] = ()

    @property
    def qualified_name(self) -> str:
        if self.declaring_type is None:
            return self.name
        return f"{self.declaring_type.qualified_name}{SEPARATOR_DOT}{self.name}"

    def __str__(self) -> str:
        return f"{self.qualified_name}({', '.join(self.parameters)})"
