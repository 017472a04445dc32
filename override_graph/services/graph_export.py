from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

from loguru import logger

from .. import constants as cs
from .. import logs as ls
from ..graph_loader import GraphLoader
from ..types_defs import GraphData, PropertyDict, PropertyValue, RelationshipData


class GraphExportIngestor:
    """Adds relationships to a loaded graph export and writes it back as JSON.

    Endpoints are resolved against the loaded nodes by label and property, so
    a relationship can only connect nodes that already exist in the export.
    """

    def __init__(self, loader: GraphLoader, output_path: str | Path):
        self.loader = loader
        self.output_path = Path(output_path)
        self._relationships: dict[tuple[int, str, int], RelationshipData] = {}
        logger.info(ls.EXPORT_INIT.format(path=self.output_path))

    def _resolve_node_id(self, spec: tuple[str, str, PropertyValue]) -> int | None:
        label, key, value = spec
        return next(
            (
                node.node_id
                for node in self.loader.find_node_by_property(key, value)
                if label in node.labels
            ),
            None,
        )

    def ensure_relationship_batch(
        self,
        from_spec: tuple[str, str, PropertyValue],
        rel_type: str,
        to_spec: tuple[str, str, PropertyValue],
        properties: PropertyDict | None = None,
    ) -> None:
        from_id = self._resolve_node_id(from_spec)
        to_id = self._resolve_node_id(to_spec)
        if from_id is None or to_id is None:
            logger.warning(
                ls.EXPORT_UNRESOLVED_REL.format(
                    rel_type=rel_type, from_spec=from_spec, to_spec=to_spec
                )
            )
            return

        key = (from_id, rel_type, to_id)
        if key not in self._relationships:
            self._relationships[key] = RelationshipData(
                from_id=from_id,
                to_id=to_id,
                type=rel_type,
                properties=dict(properties or {}),
            )

    @property
    def pending_relationships(self) -> list[RelationshipData]:
        return list(self._relationships.values())

    def flush_all(self) -> None:
        logger.info(ls.EXPORT_FLUSHING.format(path=self.output_path))

        data = self.loader.to_dict()
        relationships = list(data[cs.KEY_RELATIONSHIPS])
        existing = {
            (rel[cs.KEY_FROM_ID], rel[cs.KEY_TYPE], rel[cs.KEY_TO_ID])
            for rel in relationships
        }
        added = [rel for key, rel in self._relationships.items() if key not in existing]
        relationships.extend(added)

        graph_data = GraphData(
            nodes=data[cs.KEY_NODES],
            relationships=relationships,
            metadata={
                **data.get(cs.KEY_METADATA, {}),
                cs.KEY_TOTAL_NODES: len(data[cs.KEY_NODES]),
                cs.KEY_TOTAL_RELATIONSHIPS: len(relationships),
                cs.KEY_EXPORTED_AT: datetime.now(UTC).isoformat(),
            },
        )

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.output_path, "w", encoding=cs.ENCODING_UTF8) as f:
            json.dump(graph_data, f, indent=cs.JSON_INDENT, ensure_ascii=False)

        logger.info(
            ls.EXPORT_FLUSH_SUCCESS.format(rels=len(added), path=self.output_path)
        )
        self._relationships.clear()
