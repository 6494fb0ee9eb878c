"""CLI entry point for api-explorer."""

import json
import logging
from pathlib import Path

import click

from api_explorer.config import ExplorerConfig
from api_explorer.errors import ExplorerError
from api_explorer.form.model import field_spec
from api_explorer.parser.swagger import load_document
from api_explorer.request.curl import to_curl
from api_explorer.session import ExplorerSession

DEFAULTS = ExplorerConfig()


def _source_options(func):
    """Options shared by every command: where the API and its document live."""
    func = click.option("--doc", "doc_path", default=None, type=click.Path(exists=True, path_type=Path), help="Local OpenAPI file to use instead of fetching.")(func)
    func = click.option("--timeout", default=None, type=float, envvar="API_TIMEOUT", help="Request timeout in seconds.")(func)
    func = click.option("--docs-path", default=DEFAULTS.docs_path, envvar="API_DOCS_PATH", show_default=True, help="Path of the OpenAPI document on the server.")(func)
    func = click.option("--base-url", default=DEFAULTS.base_url, envvar="API_BASE_URL", show_default=True, help="API server URL.")(func)
    return func


def _open_session(base_url: str, docs_path: str, timeout: float | None, doc_path: Path | None) -> ExplorerSession:
    """Create a session and load its document (local file or server)."""
    session = ExplorerSession(ExplorerConfig(base_url=base_url, docs_path=docs_path, timeout=timeout))
    try:
        if doc_path:
            session.load(load_document(doc_path))
        else:
            session.fetch_docs()
    except ExplorerError as e:
        raise click.ClickException(str(e))
    return session


def _parse_pairs(pairs: tuple[str, ...], option: str) -> list[tuple[str, str]]:
    result = []
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected name=value, got {pair!r}", param_hint=option)
        result.append((name, value))
    return result


def _prepare(session: ExplorerSession, method: str, path: str, query: tuple[str, ...], body: tuple[str, ...]) -> None:
    """Select the endpoint and apply command-line field values."""
    try:
        endpoint = session.select(method, path)
    except KeyError:
        raise click.ClickException(f"Unknown endpoint: {method.upper()} {path}")

    for name, value in _parse_pairs(query, "-q"):
        session.update("query", name, value)

    for name, value in _parse_pairs(body, "-b"):
        field_type, _ = field_spec(endpoint, session.document, "body", name)
        raw = value
        if field_type in ("array", "object"):
            try:
                raw = json.loads(value)
            except json.JSONDecodeError as e:
                raise click.BadParameter(f"{name}: invalid JSON ({e.msg})", param_hint="-b")
        session.update("body", name, raw)

    if session.form.errors:
        details = ", ".join(f"{k}: {v}" for k, v in session.form.errors.items())
        raise click.ClickException(f"Invalid input ({details})")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log requests and state changes.")
def main(verbose: bool):
    """API Explorer — browse and call endpoints described by an OpenAPI document."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@_source_options
def endpoints(base_url: str, docs_path: str, timeout: float | None, doc_path: Path | None):
    """List the endpoints of the API document."""
    session = _open_session(base_url, docs_path, timeout, doc_path)
    for ep in session.endpoints:
        click.echo(f"{ep.method:<7} {ep.path}  {ep.summary}")
    click.echo(f"Found {len(session.endpoints)} endpoints.")


@main.command()
@click.argument("method")
@click.argument("path")
@click.option("-q", "--query", multiple=True, help="Parameter value as name=value.")
@click.option("-b", "--body", multiple=True, help="Body property value as name=value.")
@click.option("--json", "as_json", is_flag=True, help="Print the request as JSON instead of curl.")
@_source_options
def preview(method: str, path: str, query: tuple[str, ...], body: tuple[str, ...], as_json: bool,
            base_url: str, docs_path: str, timeout: float | None, doc_path: Path | None):
    """Show the request that would be sent."""
    session = _open_session(base_url, docs_path, timeout, doc_path)
    _prepare(session, method, path, query, body)

    request = session.preview
    if as_json:
        click.echo(request.model_dump_json(indent=2))
    else:
        click.echo(to_curl(request))


@main.command()
@click.argument("method")
@click.argument("path")
@click.option("-q", "--query", multiple=True, help="Parameter value as name=value.")
@click.option("-b", "--body", multiple=True, help="Body property value as name=value.")
@click.option("--history-out", default=None, type=click.Path(path_type=Path), help="Write the request history as JSON.")
@_source_options
def send(method: str, path: str, query: tuple[str, ...], body: tuple[str, ...], history_out: Path | None,
         base_url: str, docs_path: str, timeout: float | None, doc_path: Path | None):
    """Validate, send the request and print the response."""
    session = _open_session(base_url, docs_path, timeout, doc_path)
    _prepare(session, method, path, query, body)

    try:
        entry = session.submit()
    except ExplorerError as e:
        raise click.ClickException(f"Request failed: {e}")

    if entry is None:
        missing = ", ".join(session.form.errors)
        raise click.ClickException(f"Missing required fields: {missing}")

    click.echo(f"{entry.status} ({entry.duration_ms}ms)")
    click.echo(json.dumps(entry.response, indent=2, ensure_ascii=False))

    if history_out:
        history_out.parent.mkdir(parents=True, exist_ok=True)
        history_out.write_text(session.history.to_json(), encoding="utf-8")
        click.echo(f"History saved to {history_out}")
