from __future__ import annotations

from collections import defaultdict

from loguru import logger

from . import constants as cs
from . import exceptions as ex
from . import logs as ls
from .graph_loader import GraphLoader
from .models import GraphNode, GraphRelationship, MethodDecl, TypeDecl


class TypeHierarchy:
    """Ordered, possibly cyclic supertype graph over `TypeDecl`s.

    `get_supertypes` lists superclasses before interfaces, each group in the
    order the edges were added. Once frozen the hierarchy is a read-only
    snapshot and every mutation raises `ContractViolation`.
    """

    def __init__(self) -> None:
        self._types: dict[str, TypeDecl] = {}
        self._supertypes: dict[TypeDecl, list[TypeDecl]] = {}
        self._subtypes: defaultdict[TypeDecl, list[TypeDecl]] = defaultdict(list)
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def types(self) -> tuple[TypeDecl, ...]:
        return tuple(self._types.values())

    def freeze(self) -> TypeHierarchy:
        self._frozen = True
        return self

    def _check_mutable(self) -> None:
        if self._frozen:
            raise ex.ContractViolation(ex.HIERARCHY_FROZEN)

    def add_type(self, type_: TypeDecl) -> TypeDecl:
        self._check_mutable()
        if type_ in self._supertypes:
            return self._types[type_.qualified_name]
        self._types[type_.qualified_name] = type_
        self._supertypes[type_] = []
        return type_

    def add_supertype(self, type_: TypeDecl, supertype: TypeDecl) -> None:
        type_ = self.add_type(type_)
        supertype = self.add_type(supertype)

        supertypes = self._supertypes[type_]
        if supertype in supertypes:
            logger.debug(
                ls.DUPLICATE_SUPERTYPE.format(
                    supertype=supertype, type_name=type_.qualified_name
                )
            )
            return
        supertypes.append(supertype)
        self._subtypes[supertype].append(type_)

    def get_supertypes(self, type_: TypeDecl) -> tuple[TypeDecl, ...]:
        try:
            supertypes = self._supertypes[type_]
        except KeyError as e:
            raise ex.ModelBackingError(
                ex.UNKNOWN_TYPE.format(type_name=type_.qualified_name)
            ) from e
        return tuple(sorted(supertypes, key=lambda supertype: supertype.is_interface))

    def get_subtypes(self, type_: TypeDecl) -> tuple[TypeDecl, ...]:
        if type_ not in self._supertypes:
            raise ex.ModelBackingError(
                ex.UNKNOWN_TYPE.format(type_name=type_.qualified_name)
            )
        return tuple(self._subtypes.get(type_, ()))

    def get_type(self, qualified_name: str) -> TypeDecl | None:
        return self._types.get(qualified_name)

    def find_method(self, qualified_name: str) -> MethodDecl | None:
        type_qn, _, method_name = qualified_name.rpartition(cs.SEPARATOR_DOT)
        if not type_qn or (type_ := self.get_type(type_qn)) is None:
            return None
        return next(
            (method for method in type_.get_methods() if method.name == method_name),
            None,
        )

    def __contains__(self, type_: object) -> bool:
        return type_ in self._supertypes

    def __len__(self) -> int:
        return len(self._types)


def _type_kind(node: GraphNode) -> cs.TypeKind | None:
    if cs.NodeLabel.INTERFACE in node.labels:
        return cs.TypeKind.INTERFACE
    if cs.NodeLabel.CLASS in node.labels:
        return cs.TypeKind.CLASS
    return None


def _method_flags(node: GraphNode, method_name: str) -> set[cs.MethodFlag]:
    flags: set[cs.MethodFlag] = set()
    modifiers = node.properties.get(cs.KEY_MODIFIERS) or []
    if isinstance(modifiers, str):
        modifiers = [modifiers]

    for modifier in modifiers:
        try:
            flags.add(cs.MethodFlag(str(modifier).lower()))
        except ValueError:
            logger.debug(
                ls.UNKNOWN_MODIFIER.format(modifier=modifier, method=method_name)
            )
    return flags


def _add_method_node(owner: TypeDecl, node: GraphNode) -> MethodDecl:
    name = node.properties.get(cs.KEY_NAME)
    if not isinstance(name, str) or not name:
        raise ex.ModelBackingError(ex.METHOD_NAME_REQUIRED.format(node_id=node.node_id))

    parameters = node.properties.get(cs.KEY_PARAMETERS) or []
    if isinstance(parameters, str):
        parameters = [parameters]
    return owner.add_method(
        name,
        flags=_method_flags(node, f"{owner.qualified_name}{cs.SEPARATOR_DOT}{name}"),
        is_constructor=bool(node.properties.get(cs.KEY_IS_CONSTRUCTOR, False)),
        parameters=[str(parameter) for parameter in parameters],
    )


def _skip_dangling(rel: GraphRelationship) -> None:
    logger.debug(
        ls.DANGLING_RELATIONSHIP.format(
            rel_type=rel.type, from_id=rel.from_id, to_id=rel.to_id
        )
    )


def build_hierarchy_from_graph(loader: GraphLoader) -> TypeHierarchy:
    logger.info(ls.BUILDING_HIERARCHY.format(path=loader.file_path))

    hierarchy = TypeHierarchy()
    types_by_id: dict[int, TypeDecl] = {}
    for node in loader.nodes:
        if (kind := _type_kind(node)) is None:
            continue
        qualified_name = node.properties.get(cs.KEY_QUALIFIED_NAME)
        if not isinstance(qualified_name, str) or not qualified_name:
            raise ex.ModelBackingError(
                ex.TYPE_NAME_REQUIRED.format(node_id=node.node_id)
            )
        types_by_id[node.node_id] = hierarchy.add_type(
            TypeDecl(qualified_name=qualified_name, kind=kind)
        )

    # (H) edges leaving non-type nodes are never read
    method_count = 0
    for node_id, owner in types_by_id.items():
        for rel in loader.get_outgoing_relationships(
            node_id, cs.RelationshipType.DEFINES_METHOD
        ):
            method_node = loader.get_node_by_id(rel.to_id)
            if method_node is None or cs.NodeLabel.METHOD not in method_node.labels:
                _skip_dangling(rel)
                continue
            _add_method_node(owner, method_node)
            method_count += 1

        for rel_type in cs.SUPERTYPE_RELATIONSHIPS:
            for rel in loader.get_outgoing_relationships(node_id, rel_type):
                if (supertype := types_by_id.get(rel.to_id)) is None:
                    _skip_dangling(rel)
                    continue
                hierarchy.add_supertype(owner, supertype)

    logger.info(ls.BUILT_HIERARCHY.format(types=len(hierarchy), methods=method_count))
    return hierarchy.freeze()
