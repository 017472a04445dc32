import sys
from collections.abc import Iterator
from contextlib import contextmanager

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from . import constants as cs
from . import exceptions as ex
from .config import settings
from .graph_loader import GraphLoader, load_graph
from .hierarchy import TypeHierarchy, build_hierarchy_from_graph
from .models import MethodDecl, TypeDecl
from .resolution import (
    OverrideResolver,
    collect_method_overrides,
    process_all_method_overrides,
)
from .services.graph_export import GraphExportIngestor

app = typer.Typer(
    name="override-graph",
    help="Resolve method override relationships across the type hierarchy of an "
    "exported code graph: which method a declaration overrides, where its "
    "override chain starts, and which subtype method overrides it.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console(soft_wrap=True)

GRAPH_OPTION = typer.Option(
    None,
    "-g",
    "--graph",
    help="Path to the exported graph JSON file (defaults to GRAPH_FILE)",
)
TEST_VISIBILITY_OPTION = typer.Option(
    None,
    "--test-visibility/--no-test-visibility",
    help="Reject results that are not visible from the queried method's type",
)


def style(
    text: str, color: cs.Color, modifier: cs.StyleModifier = cs.StyleModifier.BOLD
) -> str:
    if modifier == cs.StyleModifier.NONE:
        return f"[{color}]{text}[/{color}]"
    return f"[{modifier} {color}]{text}[/{modifier} {color}]"


def _fail(message: str) -> typer.Exit:
    console.print(style(message, cs.Color.RED))
    return typer.Exit(1)


@contextmanager
def _reporting_query_errors() -> Iterator[None]:
    try:
        yield
    except ex.OverrideGraphError as e:
        logger.error(cs.CLI_ERR_QUERY_FAILED.format(error=e))
        raise _fail(cs.CLI_ERR_QUERY_FAILED.format(error=e)) from e


def _load(graph_file: str | None) -> tuple[GraphLoader, TypeHierarchy]:
    try:
        loader = load_graph(settings.resolve_graph_file(graph_file))
        return loader, build_hierarchy_from_graph(loader)
    except (FileNotFoundError, ex.OverrideGraphError) as e:
        raise _fail(cs.CLI_ERR_LOAD_GRAPH.format(error=e)) from e


def _find_method(hierarchy: TypeHierarchy, qualified_name: str) -> MethodDecl:
    if (method := hierarchy.find_method(qualified_name)) is None:
        raise _fail(cs.CLI_ERR_UNKNOWN_METHOD.format(qualified_name=qualified_name))
    return method


def _find_type(hierarchy: TypeHierarchy, qualified_name: str) -> TypeDecl:
    if (type_ := hierarchy.get_type(qualified_name)) is None:
        raise _fail(cs.CLI_ERR_UNKNOWN_TYPE.format(qualified_name=qualified_name))
    return type_


def _resolver(
    hierarchy: TypeHierarchy, focus_type: TypeDecl | None = None
) -> OverrideResolver:
    try:
        checker = settings.visibility_checker()
    except ValueError as e:
        raise _fail(str(e)) from e
    return OverrideResolver(
        hierarchy, focus_type=focus_type, visibility_checker=checker
    )


@app.callback()
def main(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level for diagnostics (defaults to LOG_LEVEL)"
    ),
) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=(log_level or settings.LOG_LEVEL).upper(),
        format=cs.LOG_FORMAT,
    )


@app.command(help="Show the method directly overridden by a method")
def overridden(
    method_qn: str = typer.Argument(
        ..., help="Qualified method name, e.g. pkg.Dog.speak"
    ),
    graph_file: str | None = GRAPH_OPTION,
    test_visibility: bool | None = TEST_VISIBILITY_OPTION,
) -> None:
    _, hierarchy = _load(graph_file)
    method = _find_method(hierarchy, method_qn)
    resolver = _resolver(hierarchy, method.declaring_type)

    with _reporting_query_errors():
        target = resolver.find_overridden_method(
            method, settings.resolve_test_visibility(test_visibility)
        )

    if target is None:
        console.print(
            style(cs.CLI_MSG_NO_OVERRIDDEN.format(method=method), cs.Color.YELLOW)
        )
        return
    console.print(
        style(
            cs.CLI_MSG_OVERRIDDEN.format(method=method, target=target),
            cs.Color.GREEN,
        )
    )


@app.command(help="Show the declaration at the root of a method's override chain")
def declaring(
    method_qn: str = typer.Argument(
        ..., help="Qualified method name, e.g. pkg.Puppy.speak"
    ),
    graph_file: str | None = GRAPH_OPTION,
    test_visibility: bool | None = TEST_VISIBILITY_OPTION,
) -> None:
    _, hierarchy = _load(graph_file)
    method = _find_method(hierarchy, method_qn)
    resolver = _resolver(hierarchy, method.declaring_type)

    with _reporting_query_errors():
        target = resolver.find_declaring_method(
            method, settings.resolve_test_visibility(test_visibility)
        )

    if target is None:
        console.print(
            style(cs.CLI_MSG_NO_OVERRIDDEN.format(method=method), cs.Color.YELLOW)
        )
        return
    console.print(
        style(
            cs.CLI_MSG_DECLARED_BY.format(method=method, target=target),
            cs.Color.GREEN,
        )
    )


@app.command(help="Show the full override chain of a method")
def chain(
    method_qn: str = typer.Argument(..., help="Qualified method name"),
    graph_file: str | None = GRAPH_OPTION,
    test_visibility: bool | None = TEST_VISIBILITY_OPTION,
) -> None:
    _, hierarchy = _load(graph_file)
    method = _find_method(hierarchy, method_qn)
    resolver = _resolver(hierarchy, method.declaring_type)

    with _reporting_query_errors():
        methods = resolver.find_override_chain(
            method, settings.resolve_test_visibility(test_visibility)
        )

    console.print(
        style(cs.CLI_MSG_CHAIN_ARROW.join(str(m) for m in methods), cs.Color.CYAN)
    )


@app.command(help="Show the method of a type that overrides a given method")
def overriding(
    type_qn: str = typer.Argument(..., help="Qualified name of the overriding type"),
    method_qn: str = typer.Argument(
        ..., help="Qualified name of the overridden method"
    ),
    graph_file: str | None = GRAPH_OPTION,
) -> None:
    _, hierarchy = _load(graph_file)
    type_ = _find_type(hierarchy, type_qn)
    method = _find_method(hierarchy, method_qn)
    resolver = _resolver(hierarchy, type_)

    with _reporting_query_errors():
        target = resolver.find_overriding_method_in_type(type_, method)

    if target is None:
        console.print(
            style(
                cs.CLI_MSG_NO_OVERRIDING.format(type_name=type_, method=method),
                cs.Color.YELLOW,
            )
        )
        return
    console.print(
        style(
            cs.CLI_MSG_OVERRIDING.format(method=method, target=target),
            cs.Color.GREEN,
        )
    )


@app.command(help="Resolve every override relationship in the graph")
def overrides(
    graph_file: str | None = GRAPH_OPTION,
    test_visibility: bool | None = TEST_VISIBILITY_OPTION,
    output: str | None = typer.Option(
        None,
        "-o",
        "--output",
        help="Write the graph with OVERRIDES relationships added to this JSON file",
    ),
) -> None:
    loader, hierarchy = _load(graph_file)
    resolver = _resolver(hierarchy)
    resolved_visibility = settings.resolve_test_visibility(test_visibility)

    with _reporting_query_errors():
        if output:
            ingestor = GraphExportIngestor(loader, output)
            edges = process_all_method_overrides(
                resolver, hierarchy.types, ingestor, resolved_visibility
            )
            ingestor.flush_all()
        else:
            edges = collect_method_overrides(
                resolver, hierarchy.types, resolved_visibility
            )

    if not edges:
        console.print(style(cs.CLI_MSG_NO_OVERRIDES, cs.Color.YELLOW))
        return

    table = Table(title=cs.TABLE_TITLE_OVERRIDES)
    table.add_column(cs.TABLE_COL_METHOD, style=cs.Color.CYAN)
    table.add_column(cs.TABLE_COL_OVERRIDES, style=cs.Color.GREEN)
    for method, target in edges:
        table.add_row(method.qualified_name, target.qualified_name)
    console.print(table)


@app.command(
    name="graph-loader", help="Load and display summary of exported graph JSON"
)
def graph_loader_command(
    graph_file: str = typer.Argument(..., help="Path to the exported graph JSON file"),
) -> None:
    try:
        summary = load_graph(graph_file).summary()
    except (FileNotFoundError, ex.OverrideGraphError) as e:
        raise _fail(cs.CLI_ERR_LOAD_GRAPH.format(error=e)) from e

    console.print(style(cs.CLI_MSG_GRAPH_SUMMARY, cs.Color.GREEN))
    console.print(f"  Total nodes: {summary['total_nodes']}")
    console.print(f"  Total relationships: {summary['total_relationships']}")
    console.print(f"  Node types: {list(summary['node_labels'].keys())}")
    console.print(
        f"  Relationship types: {list(summary['relationship_types'].keys())}"
    )


if __name__ == "__main__":
    app()
