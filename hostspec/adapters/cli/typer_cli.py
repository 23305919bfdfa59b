# /hostspec/adapters/cli/typer_cli.py
from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from hostspec.adapters.system.logging_cfg import configure_logger
from hostspec.adapters.system.service_factory import build_expander
from hostspec.config import settings
from hostspec.domain.grammar import parse_port
from hostspec.domain.models import USAGE, ExpansionResult, HostFileError, HostsUnresolvedError

app = typer.Typer(add_completion=False, help="Expand compact IPv4 host specs into address lists.")
err_console = Console(stderr=True)


class OutputFormat(str, Enum):
    text = "text"
    json = "json"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _validate_ports(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    bad = [p for p in value.split(",") if parse_port(p.strip()) is None]
    if bad:
        raise typer.BadParameter(f"ports must be 1-65535, got: {', '.join(bad)}")
    return ",".join(p.strip() for p in value.split(","))


def _ports_for(result: ExpansionResult, ports: Optional[str]) -> str:
    # host:port shorthand > --ports > DEFAULT_PORTS
    return result.default_port or ports or settings.DEFAULT_PORTS


def _emit(result: ExpansionResult, output: OutputFormat, ports: Optional[str]) -> None:
    if output is OutputFormat.json:
        payload = result.to_dict()
        payload["ports"] = _ports_for(result, ports)
        typer.echo(json.dumps(payload, indent=2))
        return
    lines = result.addresses + result.port_bindings
    if lines:
        typer.echo("\n".join(lines))


def _summary(result: ExpansionResult, ports: Optional[str]) -> None:
    table = Table(title="Summary", show_lines=True)
    table.add_column("Item")
    table.add_column("Value")
    table.add_row("addresses", str(len(result.addresses)))
    table.add_row("port bindings", str(len(result.port_bindings)))
    table.add_row("ports", _ports_for(result, ports))
    for s in result.skipped:
        table.add_row(f"skipped {s.token}", s.reason)
    err_console.print(table)


@app.command()
def expand(
    host: str = typer.Argument("", help="IP, CIDR, range, comma list or host:port"),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", dir_okay=False, help="Host list file, one spec per line (optional :port)"
    ),
    exclude: str = typer.Option("", "--exclude", "-x", help="Hosts to leave out, same grammar as HOST"),
    ports: Optional[str] = typer.Option(
        None,
        "--ports",
        "-p",
        callback=_validate_ports,
        help="Comma-separated ports (overrides DEFAULT_PORTS; a host:port HOST wins)",
    ),
    output: OutputFormat = typer.Option(OutputFormat.text, case_sensitive=False, help="text | json"),
    seed: Optional[int] = typer.Option(None, help="Seed the /8 sampler (overrides SAMPLER_SEED)"),
    summary: bool = typer.Option(False, help="Print a summary table on stderr"),
    log_level: LogLevel = typer.Option(
        LogLevel(settings.LOG_LEVEL.upper()), case_sensitive=False, help="Log level for JSON logs on stderr"
    ),
):
    """Print every address HOST (and --file) denotes, minus --exclude."""
    configure_logger(log_level.value)
    cfg = settings if seed is None else settings.model_copy(update={"SAMPLER_SEED": seed})
    expander = build_expander(cfg)

    try:
        result = expander.expand(host, filename=str(file) if file else "", exclude=exclude)
    except HostsUnresolvedError as e:
        err_console.print(str(e), style="red", markup=False, highlight=False)
        raise typer.Exit(code=1)
    except HostFileError as e:
        _emit(e.partial, output, ports)
        err_console.print(str(e), style="red", markup=False, highlight=False)
        raise typer.Exit(code=2)

    _emit(result, output, ports)
    if summary:
        _summary(result, ports)


@app.command()
def grammar():
    """Show every supported host spec form."""
    typer.echo(USAGE.split("\n", 1)[1])


if __name__ == "__main__":
    app()
