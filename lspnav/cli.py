"""Command-line interface for lspnav."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import orjson
import typer
import yaml
from rich.console import Console
from rich.tree import Tree

from .config import LspnavConfig
from .events import LoggingEventSink
from .formatting import Entry, entry_to_dict, position_label
from .host import StaticEditorHost
from .logging import configure_logging, get_logger
from .lsp_client.messages import Location, ResolutionRequest
from .lsp_client.recorded import RecordedSession, RecordingError, load_recording
from .methods import CALL_HIERARCHY_METHODS, Method, parse_method, selectable_methods
from .source import GatherContext, NavigationSource, collect

app = typer.Typer(help="Turn language-server answers into navigable entries.")
LOGGER = get_logger(__name__)

CONFIG_FILE = "lspnav.yaml"
BUFNR = 1
WINID = 1000


@app.callback()
def main() -> None:
    """lspnav CLI root."""
    return None


def _load_yaml_config(config_path: Path) -> dict[str, object]:
    if not config_path.exists():
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise typer.BadParameter(f"Failed to parse {config_path}: {error}") from error
    if not isinstance(data, dict):
        raise typer.BadParameter(f"{config_path.name} must contain a mapping")
    return data


def _merge_config(config_path: Path, cli_options: dict[str, object], source_options: dict[str, object]) -> LspnavConfig:
    file_overrides = _load_yaml_config(config_path)
    merged: dict[str, object] = {**file_overrides}
    merged.update({key: value for key, value in cli_options.items() if value is not None})
    source = merged.get("source") or {}
    if not isinstance(source, dict):
        raise typer.BadParameter("'source' must be a mapping")
    merged["source"] = {**source, **{key: value for key, value in source_options.items() if value is not None}}
    return LspnavConfig(**merged)


def _open_session(config: LspnavConfig) -> RecordedSession:
    if not config.recording:
        raise typer.BadParameter("A recording is required (--recording or 'recording' in lspnav.yaml)")
    try:
        return RecordedSession(load_recording(Path(config.recording)))
    except RecordingError as error:
        raise typer.BadParameter(str(error)) from error


async def _expand_into(
    source: NavigationSource,
    context: GatherContext,
    config: LspnavConfig,
    entry: Entry,
    branch: Tree,
    depth: int,
) -> None:
    if depth <= 0 or not entry.is_tree:
        return
    for batch in await collect(source, context, config.source, parent=entry):
        for child in batch:
            child_branch = branch.add(child.label)
            await _expand_into(source, context, config, child, child_branch, depth - 1)


async def _render_hierarchy(
    source: NavigationSource,
    context: GatherContext,
    config: LspnavConfig,
    roots: list[Entry],
    console: Console,
) -> None:
    for root in roots:
        label = root.label
        if isinstance(root.target, Location):
            label = f"{root.word}  {root.path}:{position_label(root.target.range)}"
        tree = Tree(label)
        await _expand_into(source, context, config, root, tree, config.expand_depth)
        console.print(tree)


async def _run_gather(config: LspnavConfig, host: StaticEditorHost, as_json: bool) -> None:
    session = _open_session(config)
    source = NavigationSource(session, session, host, events=LoggingEventSink(LOGGER))
    context = GatherContext(bufnr=BUFNR, winid=WINID, input=config.source.query)
    batches = await collect(source, context, config.source)
    entries = [entry for batch in batches for entry in batch]

    if as_json:
        typer.echo(orjson.dumps([entry_to_dict(entry) for entry in entries], option=orjson.OPT_INDENT_2).decode("utf-8"))
        return

    method = parse_method(config.source.method)
    if method in CALL_HIERARCHY_METHODS:
        await _render_hierarchy(source, context, config, entries, Console())
        return
    for entry in entries:
        typer.echo(entry.label)


@app.command("gather")
def gather(
    method: Optional[str] = typer.Option(None, "--method", "-m", help="Navigation method tag."),
    file: Path = typer.Option(Path("."), "--file", "-f", help="Buffer file the request is issued from."),
    line: int = typer.Option(1, min=1, help="1-indexed cursor line."),
    col: int = typer.Option(1, min=1, help="1-indexed cursor column."),
    query: Optional[str] = typer.Option(None, help="workspace/symbol query."),
    recording: Optional[Path] = typer.Option(None, help="YAML or JSON recording of server answers."),
    include_declaration: Optional[bool] = typer.Option(None, help="Send includeDeclaration with references."),
    expand_depth: Optional[int] = typer.Option(None, min=0, help="Call-hierarchy levels to expand below the roots."),
    as_json: bool = typer.Option(False, "--json", help="Print entries as JSON."),
    config_path: Path = typer.Option(Path(CONFIG_FILE), "--config", help="Configuration file."),
    log_level: Optional[str] = typer.Option(None, help="Log level."),
) -> None:
    """Run one navigation request and print its entries."""
    config = _merge_config(
        config_path,
        {
            "recording": str(recording) if recording else None,
            "expand_depth": expand_depth,
            "log_level": log_level,
        },
        {
            "method": method,
            "query": query,
            "include_declaration": include_declaration,
        },
    )
    configure_logging(config.log_level)
    host = StaticEditorHost.for_file(file, line, col, bufnr=BUFNR, winid=WINID)
    asyncio.run(_run_gather(config, host, as_json))


async def _run_resolve(config: LspnavConfig, host: StaticEditorHost) -> None:
    session = _open_session(config)
    source = NavigationSource(session, session, host, events=LoggingEventSink(LOGGER))
    context = GatherContext(bufnr=BUFNR, winid=WINID)
    params = config.source.model_copy(update={"method": Method.WORKSPACE_SYMBOL.value})
    for batch in await collect(source, context, params):
        for entry in batch:
            target = entry.target
            if not isinstance(target, ResolutionRequest):
                continue
            resolved = await source.resolve(BUFNR, target)
            if resolved is None:
                typer.echo(f"{entry.word}\t(unresolved)")
            else:
                typer.echo(f"{entry.word}\t{entry.path}:{position_label(resolved)}")


@app.command("resolve")
def resolve(
    query: Optional[str] = typer.Option(None, help="workspace/symbol query."),
    recording: Optional[Path] = typer.Option(None, help="YAML or JSON recording of server answers."),
    config_path: Path = typer.Option(Path(CONFIG_FILE), "--config", help="Configuration file."),
    log_level: Optional[str] = typer.Option(None, help="Log level."),
) -> None:
    """Resolve the ranges of workspace symbols that arrived without one."""
    config = _merge_config(
        config_path,
        {"recording": str(recording) if recording else None, "log_level": log_level},
        {"query": query},
    )
    configure_logging(config.log_level)
    asyncio.run(_run_resolve(config, StaticEditorHost.for_file(Path("."), bufnr=BUFNR, winid=WINID)))


@app.command("methods")
def methods() -> None:
    """List the navigation methods that can be gathered."""
    for method in selectable_methods():
        typer.echo(method.value)
