"""Scan command: recover and report the cache entries of a directory."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import msgspec
from cyclopts import Parameter
from rich.console import Console
from rich.table import Table

from cli.exit_codes import ExitCode
from serde_msgspec import dumps_json, encode_json_lines
from span_cache.scan import SpanScanResult, scan_cache_directory
from span_cache.settings import default_span_cache_settings


def scan_command(
    directory: Annotated[
        Path | None,
        Parameter(help="Cache directory to scan (defaults to $SPANCACHE_DIR)."),
    ] = None,
    *,
    json: Annotated[
        bool,
        Parameter(name="--json", help="Emit the scan result as JSON."),
    ] = False,
    jsonl: Annotated[
        bool,
        Parameter(name="--jsonl", help="Emit one JSON line per cache entry."),
    ] = False,
    delete_invalid: Annotated[
        bool | None,
        Parameter(
            name="--delete-invalid",
            help="Delete files that are not cache entries.",
            env_var="SPANCACHE_DELETE_INVALID",
        ),
    ] = None,
    upgrade: Annotated[
        bool | None,
        Parameter(
            name="--upgrade",
            negative="--no-upgrade",
            help="Rename legacy cache files to the current grammar.",
            env_var="SPANCACHE_UPGRADE_LEGACY",
        ),
    ] = None,
) -> int:
    """Scan a cache directory and list its entries.

    Returns
    -------
    int
        Exit status code.
    """
    settings = default_span_cache_settings()
    overrides: dict[str, object] = {}
    if delete_invalid is not None:
        overrides["delete_invalid"] = delete_invalid
    if upgrade is not None:
        overrides["upgrade_legacy"] = upgrade
    if overrides:
        settings = msgspec.structs.replace(settings, **overrides)
    result = scan_cache_directory(directory, settings=settings)
    if json:
        sys.stdout.write(dumps_json(result, pretty=True).decode("utf-8") + "\n")
        return ExitCode.SUCCESS
    if jsonl:
        sys.stdout.write(encode_json_lines(result.entries).decode("utf-8"))
        return ExitCode.SUCCESS
    _print_scan(result)
    return ExitCode.SUCCESS


def _print_scan(result: SpanScanResult) -> None:
    console = Console()
    table = Table(title=str(result.directory))
    table.add_column("key")
    table.add_column("position", justify="right")
    table.add_column("length", justify="right")
    table.add_column("last access (ms)", justify="right")
    table.add_column("eos")
    table.add_column("file")
    for entry in result.entries:
        table.add_row(
            entry.key,
            str(entry.position),
            str(entry.length),
            str(entry.last_access_timestamp),
            "yes" if entry.is_eos else "",
            entry.file.name,
        )
    console.print(table)
    console.print(
        f"{len(result.entries)} entries ({result.total_bytes} bytes), "
        f"{len(result.upgraded)} upgraded, {len(result.rejected)} rejected, "
        f"{len(result.removed)} removed"
    )


__all__ = ["scan_command"]
