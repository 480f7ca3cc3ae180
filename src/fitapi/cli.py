from __future__ import annotations

import json
import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from fitapi.compiler.request import compile_request
from fitapi.domain.failures import CompileFailure, UnknownMethod
from fitapi.registry.lookup import all_methods, lookup
from fitapi.registry.model import FlatTemplate, MethodDescriptor, ResourceTemplate
from fitapi.settings import FitapiSettings


app = typer.Typer(no_args_is_help=True, add_completion=False)

methods_app = typer.Typer(no_args_is_help=True)
app.add_typer(methods_app, name="methods")

console = Console()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log compile decisions"),
) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def _template_lines(t: ResourceTemplate) -> list[str]:
    if isinstance(t, FlatTemplate):
        return ["/".join(t.segments)]
    lines = [f"{key}: {'/'.join(flat.segments)}" for key, flat in t.variants]
    for opt in t.optional:
        lines.append(f"+ if {' or '.join(opt.triggers)}: {'/'.join(opt.segments)}")
    return lines


def _rule_lines(m: MethodDescriptor) -> list[str]:
    out = []
    for rule in m.rules:
        out.append(f"{type(rule).__name__}({', '.join(rule.names)})")
    return out


def _parse_params(pairs: List[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for raw in pairs:
        if "=" not in raw:
            raise typer.BadParameter(f"expected key=value, got: {raw}")
        key, value = raw.split("=", 1)
        params[key.strip()] = value
    return params


@methods_app.command("list")
def methods_list(
    verb: Optional[str] = typer.Option(None, help="Filter by HTTP method (GET/POST/DELETE)"),
    auth: Optional[str] = typer.Option(None, help="Filter by auth requirement: none|required|user-id"),
    format: str = typer.Option("table", help="Output format: table|json"),
) -> None:
    rows = sorted(all_methods().values(), key=lambda m: m.name)
    if verb:
        rows = [m for m in rows if m.http_method == verb.upper().strip()]
    if auth:
        rows = [m for m in rows if m.auth.value == auth.lower().strip()]

    if format.lower() == "json":
        payload = [
            {
                "name": m.name,
                "http_method": m.http_method,
                "auth": m.auth.value,
                "resources": _template_lines(m.resources),
                "description": m.description,
            }
            for m in rows
        ]
        console.print_json(json.dumps(payload))
        return

    console.print(f"[bold]Methods:[/bold] {len(rows)}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("METHOD", no_wrap=True)
    table.add_column("VERB", no_wrap=True)
    table.add_column("AUTH", no_wrap=True)
    table.add_column("RESOURCE")

    for m in rows:
        table.add_row(m.name, m.http_method, m.auth.value, "\n".join(_template_lines(m.resources)))

    console.print(table)


@methods_app.command("show")
def methods_show(
    name: str = typer.Argument(..., help="Method name, e.g. api-log-water"),
) -> None:
    m = lookup(name)
    if isinstance(m, UnknownMethod):
        console.print(f"[bold red]error[/bold red] {m.message}")
        raise typer.Exit(code=1)

    console.print(f"[bold]{m.name}[/bold]  {m.description}")
    console.print(f"Verb: {m.http_method}")
    console.print(f"Auth: {m.auth.value}")
    console.print(f"Headers: {', '.join(m.allowed_headers) or '-'}")
    if m.query_parameters:
        console.print(f"Query: {', '.join(m.query_parameters)}")
    console.print("Resource:")
    for line in _template_lines(m.resources):
        console.print(f"  {line}")
    rules = _rule_lines(m)
    if rules:
        console.print("Rules:")
        for line in rules:
            console.print(f"  {line}")


@app.command("compile")
def compile_command(
    name: str = typer.Argument(..., help="Method name, e.g. api-search-foods"),
    param: Optional[List[str]] = typer.Option(None, "--param", "-p", help="Parameter as key=value (repeatable)"),
    token: str = typer.Option("", help="User auth_token"),
    secret: str = typer.Option("", help="User auth_secret"),
    api_version: Optional[str] = typer.Option(None, help="Override the API version prefix"),
    format: str = typer.Option("table", help="Output format: table|json"),
) -> None:
    params = _parse_params(param or [])
    settings = FitapiSettings.from_env()

    result = compile_request(name, params, token, secret, api_version=api_version, settings=settings)

    if isinstance(result, CompileFailure):
        if format.lower() == "json":
            console.print_json(json.dumps({"error": result.kind, "message": result.message}))
        else:
            console.print(f"[bold red]{result.kind}[/bold red] {result.message}")
        raise typer.Exit(code=1)

    if format.lower() == "json":
        console.print_json(json.dumps(result.model_dump()))
        return

    console.print(f"[bold green]{result.verb}[/bold green] {result.path}")
    for k, v in result.headers.items():
        console.print(f"  {k}: {v}")
    if result.body:
        console.print(f"Body: {result.body}")


@app.command()
def ping() -> None:
    console.print("pong")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
