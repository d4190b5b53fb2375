"""Send one HTTP request built from command-line options."""

import json
from pathlib import Path
from typing import Any, BinaryIO, List, Optional, Tuple

import click
from requests.cookies import create_cookie
from rich.console import Console
from rich.table import Table

from ...constants import HTTP_METHODS
from ...core.config import ConfigManager
from ...core.request import Request
from ...core.response import Response
from ...exceptions import InvalidArgumentError, ReqchainError
from ..error_handler import CLIErrorHandler
from ..utils import parse_field, parse_header, parse_key_value

console = Console()


@click.command()
@click.argument("method", type=click.Choice(HTTP_METHODS, case_sensitive=False))
@click.argument("url")
@click.option("--query", "-q", multiple=True, help="Query parameter key=value (repeatable)")
@click.option("--header", "-H", multiple=True, help="Header 'Name: value' (repeatable)")
@click.option("--cookie", "-b", multiple=True, help="Cookie name=value (repeatable)")
@click.option("--json", "json_body", help="JSON document to send as the body")
@click.option("--form", "-f", multiple=True, help="Form field key=value (repeatable)")
@click.option(
    "--data-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Send a file's bytes verbatim",
)
@click.option(
    "--attach",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Upload a file as the 'file' field of a multipart body",
)
@click.option("--attach-type", help="Content type of the --attach file")
@click.option(
    "--field",
    "-F",
    multiple=True,
    help="Multipart field name=value or name=@path[;type=ct] (repeatable)",
)
@click.option("--no-headers", is_flag=True, help="Do not print response headers")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the response body to a file",
)
@click.pass_context
def request(
    ctx: click.Context,
    method: str,
    url: str,
    query: Tuple[str, ...],
    header: Tuple[str, ...],
    cookie: Tuple[str, ...],
    json_body: Optional[str],
    form: Tuple[str, ...],
    data_file: Optional[Path],
    attach: Optional[Path],
    attach_type: Optional[str],
    field: Tuple[str, ...],
    no_headers: bool,
    output: Optional[Path],
) -> None:
    """Send an HTTP request.

    \b
    Examples:
        reqchain request GET https://httpbin.org/get -q page=2
        reqchain request POST https://httpbin.org/post --json '{"a": 1}'
        reqchain request POST https://httpbin.org/post -F doc=@report.pdf -F note=hi
    """
    handler = CLIErrorHandler()
    opened: List[BinaryIO] = []
    try:
        builder = _build(
            ctx, query, cookie, json_body, form, data_file, attach, attach_type, field, opened
        )
        headers = dict(parse_header(h) for h in header)
        response = builder.do(method.upper(), url, headers or None)
    except ReqchainError as e:
        ctx.exit(handler.handle(e))
        return
    finally:
        for handle in opened:
            handle.close()

    if builder.error is not None:
        ctx.exit(handler.handle(builder.error))
    if response.error is not None:
        ctx.exit(handler.handle(response.error))

    _print_response(response, no_headers, output)


def _build(
    ctx: click.Context,
    query: Tuple[str, ...],
    cookie: Tuple[str, ...],
    json_body: Optional[str],
    form: Tuple[str, ...],
    data_file: Optional[Path],
    attach: Optional[Path],
    attach_type: Optional[str],
    field: Tuple[str, ...],
    opened: List[BinaryIO],
) -> Request:
    body_options = [
        name
        for name, given in (
            ("--json", json_body is not None),
            ("--form", bool(form)),
            ("--data-file", data_file is not None),
            ("--attach", attach is not None),
            ("--field", bool(field)),
        )
        if given
    ]
    if len(body_options) > 1:
        raise InvalidArgumentError(body_options[1], f"cannot be combined with {body_options[0]}")

    manager = ConfigManager(ctx.obj.get("config_file"))
    builder = Request(manager.create_client())

    if query:
        builder.with_query([parse_key_value("--query", q) for q in query])
    if cookie:
        builder.set_cookies(
            *(create_cookie(*parse_key_value("--cookie", c)) for c in cookie)
        )

    if json_body is not None:
        builder.with_json(_load_json(json_body))
    elif form:
        builder.with_form([parse_key_value("--form", f) for f in form])
    elif data_file is not None:
        handle = open(data_file, "rb")
        opened.append(handle)
        builder.with_file(handle)
    elif attach is not None:
        handle = open(attach, "rb")
        opened.append(handle)
        builder.attach_file(handle, attach_type)
    elif field:
        builder.attach_files([parse_field(f, opened) for f in field])

    return builder


def _load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as e:
        raise InvalidArgumentError("--json", f"not valid JSON: {e}") from e


def _print_response(response: Response, no_headers: bool, output: Optional[Path]) -> None:
    style = "green" if response.ok else "yellow"
    console.print(
        f"[{style}]HTTP {response.status_code} {response.raw.reason or ''}[/{style}]".rstrip(),
        highlight=False,
    )

    if not no_headers and response.headers:
        table = Table(show_header=False, box=None, pad_edge=False)
        table.add_column("Header", style="cyan", no_wrap=True)
        table.add_column("Value")
        for name, value in response.headers.items():
            table.add_row(name, value)
        console.print(table)

    if output is not None:
        output.write_bytes(response.content)
        console.print(f"[dim]Saved {len(response.content)} bytes to {output}[/dim]")
    elif response.content:
        click.echo(response.text)
