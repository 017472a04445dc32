from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, call

import pytest

from override_graph import constants as cs
from override_graph.graph_loader import GraphLoader, load_graph
from override_graph.hierarchy import build_hierarchy_from_graph
from override_graph.resolution import (
    OverrideResolver,
    collect_method_overrides,
    process_all_method_overrides,
)
from override_graph.services import IngestorProtocol
from override_graph.services.graph_export import GraphExportIngestor
from override_graph.tests.conftest import HierarchyBuilder


def method_spec(qualified_name: str) -> tuple[str, str, str]:
    return (cs.NodeLabel.METHOD, cs.KEY_QUALIFIED_NAME, qualified_name)


@pytest.fixture
def loader(type_graph_file: Path) -> GraphLoader:
    return load_graph(type_graph_file)


class TestCollectMethodOverrides:
    def test_collects_direct_overrides(self, animal_builder: HierarchyBuilder) -> None:
        h = animal_builder.hierarchy
        edges = collect_method_overrides(animal_builder.resolver(), h.types)

        assert [
            (e.method.qualified_name, e.overridden.qualified_name) for e in edges
        ] == [
            ("zoo.Dog.speak", "zoo.Animal.speak"),
            ("zoo.Puppy.speak", "zoo.Dog.speak"),
        ]

    def test_empty_types(self, animal_builder: HierarchyBuilder) -> None:
        assert collect_method_overrides(animal_builder.resolver(), []) == []

    def test_visibility_flag_forwarded(self, animal_builder: HierarchyBuilder) -> None:
        checker = MagicMock()
        checker.is_visible.return_value = False
        resolver = animal_builder.resolver(visibility_checker=checker)
        types = animal_builder.hierarchy.types

        assert len(collect_method_overrides(resolver, types)) == 2
        assert collect_method_overrides(resolver, types, test_visibility=True) == []


class TestProcessAllMethodOverrides:
    def test_emits_override_relationships(
        self, animal_builder: HierarchyBuilder, mock_ingestor: MagicMock
    ) -> None:
        edges = process_all_method_overrides(
            animal_builder.resolver(), animal_builder.hierarchy.types, mock_ingestor
        )

        assert len(edges) == 2
        assert mock_ingestor.ensure_relationship_batch.call_args_list == [
            call(
                method_spec("zoo.Dog.speak"),
                cs.RelationshipType.OVERRIDES,
                method_spec("zoo.Animal.speak"),
            ),
            call(
                method_spec("zoo.Puppy.speak"),
                cs.RelationshipType.OVERRIDES,
                method_spec("zoo.Dog.speak"),
            ),
        ]
        mock_ingestor.flush_all.assert_not_called()

    def test_no_overrides_emits_nothing(
        self, builder: HierarchyBuilder, mock_ingestor: MagicMock
    ) -> None:
        builder.cls("app.Lonely", methods=["run"])

        edges = process_all_method_overrides(
            builder.resolver(), builder.hierarchy.types, mock_ingestor
        )

        assert edges == []
        mock_ingestor.ensure_relationship_batch.assert_not_called()

    def test_accepts_generator_of_types(
        self, animal_builder: HierarchyBuilder, mock_ingestor: MagicMock
    ) -> None:
        types = (t for t in animal_builder.hierarchy.types)

        edges = process_all_method_overrides(
            animal_builder.resolver(), types, mock_ingestor
        )

        assert len(edges) == 2

    def test_logs_pass(
        self,
        animal_builder: HierarchyBuilder,
        mock_ingestor: MagicMock,
        log_messages: list[str],
    ) -> None:
        process_all_method_overrides(
            animal_builder.resolver(), animal_builder.hierarchy.types, mock_ingestor
        )

        assert any("across 3 types" in m for m in log_messages)
        assert any("Resolved 2 method overrides" in m for m in log_messages)


class TestGraphExportIngestor:
    def test_satisfies_protocol(self, loader: GraphLoader, tmp_path: Path) -> None:
        ingestor = GraphExportIngestor(loader, tmp_path / "out.json")
        assert isinstance(ingestor, IngestorProtocol)

    def test_resolves_and_deduplicates(
        self, loader: GraphLoader, tmp_path: Path
    ) -> None:
        ingestor = GraphExportIngestor(loader, tmp_path / "out.json")
        for _ in range(2):
            ingestor.ensure_relationship_batch(
                method_spec("zoo.Dog.speak"),
                cs.RelationshipType.OVERRIDES,
                method_spec("zoo.Animal.speak"),
            )

        assert ingestor.pending_relationships == [
            {"from_id": 20, "to_id": 10, "type": "OVERRIDES", "properties": {}}
        ]

    def test_unresolved_endpoint_skipped(
        self, loader: GraphLoader, tmp_path: Path, log_messages: list[str]
    ) -> None:
        ingestor = GraphExportIngestor(loader, tmp_path / "out.json")
        ingestor.ensure_relationship_batch(
            method_spec("zoo.Cat.speak"),
            cs.RelationshipType.OVERRIDES,
            method_spec("zoo.Animal.speak"),
        )

        assert ingestor.pending_relationships == []
        assert any("Cannot resolve OVERRIDES" in m for m in log_messages)

    def test_label_must_match(self, loader: GraphLoader, tmp_path: Path) -> None:
        ingestor = GraphExportIngestor(loader, tmp_path / "out.json")
        ingestor.ensure_relationship_batch(
            (cs.NodeLabel.CLASS, cs.KEY_QUALIFIED_NAME, "zoo.Dog.speak"),
            cs.RelationshipType.OVERRIDES,
            method_spec("zoo.Animal.speak"),
        )

        assert ingestor.pending_relationships == []

    def test_override_pass_round_trips_through_export(
        self, loader: GraphLoader, tmp_path: Path
    ) -> None:
        output = tmp_path / "nested" / "out.json"
        hierarchy = build_hierarchy_from_graph(loader)
        ingestor = GraphExportIngestor(loader, output)

        edges = process_all_method_overrides(
            OverrideResolver(hierarchy), hierarchy.types, ingestor
        )
        ingestor.flush_all()

        written = json.loads(output.read_text(encoding="utf-8"))
        overrides = [
            (rel["from_id"], rel["to_id"])
            for rel in written["relationships"]
            if rel["type"] == "OVERRIDES"
        ]
        assert len(edges) == 2
        assert overrides == [(20, 10), (30, 20)]
        assert written["metadata"]["total_relationships"] == 11
        assert written["metadata"]["total_nodes"] == 10
        assert written["metadata"]["exported_at"] != "2025-01-01T00:00:00Z"
        assert ingestor.pending_relationships == []

        reloaded = load_graph(output)
        assert len(reloaded.get_outgoing_relationships(30, "OVERRIDES")) == 1

    def test_flush_skips_relationships_already_in_export(
        self, loader: GraphLoader, tmp_path: Path
    ) -> None:
        output = tmp_path / "out.json"
        ingestor = GraphExportIngestor(loader, output)
        ingestor.ensure_relationship_batch(
            (cs.NodeLabel.CLASS, cs.KEY_QUALIFIED_NAME, "zoo.Puppy"),
            cs.RelationshipType.INHERITS,
            (cs.NodeLabel.CLASS, cs.KEY_QUALIFIED_NAME, "zoo.Dog"),
        )
        ingestor.flush_all()

        written = json.loads(output.read_text(encoding="utf-8"))
        assert len(written["relationships"]) == 9
