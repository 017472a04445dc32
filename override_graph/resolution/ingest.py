from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from loguru import logger

from .. import constants as cs
from .. import logs
from ..types_defs import OverrideEdge

if TYPE_CHECKING:
    from ..services import IngestorProtocol
    from ..types_defs import TypeProtocol
    from .resolver import OverrideResolver


def collect_method_overrides(
    resolver: OverrideResolver,
    types: Iterable[TypeProtocol],
    test_visibility: bool = False,
) -> list[OverrideEdge]:
    edges: list[OverrideEdge] = []
    for type_ in types:
        for method in type_.get_methods():
            overridden = resolver.find_overridden_method(method, test_visibility)
            if overridden is not None:
                edges.append(OverrideEdge(method, overridden))
    return edges


def process_all_method_overrides(
    resolver: OverrideResolver,
    types: Iterable[TypeProtocol],
    ingestor: IngestorProtocol,
    test_visibility: bool = False,
) -> list[OverrideEdge]:
    types = list(types)
    logger.info(logs.OVERRIDE_PASS.format(types=len(types)))

    edges = collect_method_overrides(resolver, types, test_visibility)
    for method, overridden in edges:
        ingestor.ensure_relationship_batch(
            (cs.NodeLabel.METHOD, cs.KEY_QUALIFIED_NAME, method.qualified_name),
            cs.RelationshipType.OVERRIDES,
            (cs.NodeLabel.METHOD, cs.KEY_QUALIFIED_NAME, overridden.qualified_name),
        )
        logger.debug(
            logs.OVERRIDE_EDGE.format(
                method_qn=method.qualified_name,
                parent_method_qn=overridden.qualified_name,
            )
        )

    logger.info(logs.OVERRIDE_PASS_DONE.format(count=len(edges)))
    return edges
