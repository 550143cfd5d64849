"""Main application setup for the spancache CLI."""

from __future__ import annotations

import logging
from typing import Annotated, Literal

from cyclopts import App, Parameter

from cli.commands.version import get_version
from cli.exit_codes import ExitCode
from cli.result_action import cli_result_action
from obs.otel.logging import configure_logging
from obs.otel.scopes import SCOPE_CLI
from obs.otel.tracing import get_tracer, record_exception

_LOGGER = logging.getLogger(__name__)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

_HELP_EPILOGUE = """
Examples:
  spancache scan ~/.cache/media           List cached spans in a directory
  spancache scan --json --delete-invalid  Emit JSON, delete foreign files
  spancache name video/1 1024 5000000 --eos
  spancache touch ./video%2f1.0.5000000.v2.exo

Environment Variables:
  SPANCACHE_DIR               Default cache directory
  SPANCACHE_UPGRADE_LEGACY    Rename version 1 files while scanning (default: true)
  SPANCACHE_DELETE_INVALID    Delete non-cache files while scanning (default: false)
  SPANCACHE_LOG_LEVEL         Default log level
"""

app = App(
    name="spancache",
    help="Inspect and maintain byte-range cache directories.",
    help_epilogue=_HELP_EPILOGUE,
    version=get_version(),
    version_flags=["--version", "-V"],
    default_parameter=Parameter(show_default=True, show_env_var=True),
    result_action=cli_result_action,
    exit_on_error=True,
    print_error=True,
    help_on_error=False,
)


@app.meta.default
def meta_launcher(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    log_level: Annotated[
        LogLevel,
        Parameter(
            name="--log-level",
            help="Logging verbosity level.",
            env_var="SPANCACHE_LOG_LEVEL",
        ),
    ] = "WARNING",
) -> int:
    """Configure logging, then dispatch to the selected command.

    Returns
    -------
    int
        Exit status code from command execution.
    """
    configure_logging(log_level)
    command, bound, _ignored = app.parse_args(list(tokens))
    tracer = get_tracer(SCOPE_CLI)
    with tracer.start_as_current_span(
        "spancache.cli",
        attributes={"cli.command": getattr(command, "__name__", str(command))},
    ) as span:
        try:
            result = command(*bound.args, **bound.kwargs)
        except Exception as exc:
            record_exception(span, exc)
            _LOGGER.error("%s", exc)  # noqa: TRY400
            return ExitCode.from_exception(exc)
    return cli_result_action(app, command, result)


app.command("cli.commands.scan:scan_command", name="scan")
app.command("cli.commands.name:name_command", name="name")
app.command("cli.commands.touch:touch_command", name="touch")
app.command("cli.commands.version:version_command", name="version", alias="v")


def main() -> None:
    """Run the spancache CLI."""
    raise SystemExit(app.meta())


__all__ = ["app", "main"]
