"""Inkwell CLI — run the server and talk to it.

Usage:
    inkwell serve                                   # Run the API with uvicorn
    inkwell init-db                                 # Create tables in INKWELL_DATABASE_URL
    inkwell register alice alice@x.com              # Prompts for a password
    inkwell login alice                             # Prints a session token
    inkwell posts                                   # List posts
    inkwell post "Title" "Body" --token <jwt>       # Create a post
    inkwell me --token <jwt>                        # Who am I?

Client commands talk to INKWELL_API_URL (default http://localhost:8080).
The token can also come from INKWELL_TOKEN; it is never written to disk.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from typing import Optional

import click
import httpx

from inkwell import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8080"


def _api_url() -> str:
    return os.environ.get("INKWELL_API_URL", DEFAULT_API_URL).rstrip("/")


def _client() -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the Inkwell backend."""
    return httpx.AsyncClient(base_url=_api_url(), timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _require_token(token: Optional[str]) -> str:
    tok = token or os.environ.get("INKWELL_TOKEN")
    if not tok:
        click.secho(
            "Error: --token required (or set INKWELL_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return tok


def _fail_on_error(r: httpx.Response) -> None:
    """Print the API's {"error": ...} message and exit non-zero."""
    if r.is_success:
        return
    try:
        message = r.json().get("error", r.text)
    except ValueError:
        message = r.text
    click.secho(f"Error ({r.status_code}): {message}", fg="red", err=True)
    sys.exit(1)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "—"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="inkwell")
def main():
    """Inkwell — blog backend with JWT sessions."""


# ---------------------------------------------------------------------------
# Server commands
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default: INKWELL_HOST)")
@click.option("--port", "-p", type=int, default=None, help="Port (default: INKWELL_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from inkwell.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "inkwell.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("init-db")
def init_db():
    """Create the users, posts, and comments tables."""
    _run(_init_db_impl())
    click.secho("Tables created.", fg="green")


async def _init_db_impl():
    from inkwell.config import get_settings
    from inkwell.db.engine import build_engine, create_tables

    engine = build_engine(get_settings())
    try:
        await create_tables(engine)
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# Client commands
# ---------------------------------------------------------------------------


@main.command()
@click.argument("username")
@click.argument("email")
@click.password_option()
def register(username: str, email: str, password: str):
    """Register a new account."""
    _run(_register_impl(username, email, password))


async def _register_impl(username: str, email: str, password: str):
    async with _client() as c:
        r = await c.post(
            "/api/auth/register",
            json={"username": username, "password": password, "email": email},
        )
        _fail_on_error(r)
        click.secho(f"Registered {username} (id {r.json()['user_id']})", fg="green")


@main.command()
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True)
def login(username: str, password: str):
    """Log in and print a session token."""
    _run(_login_impl(username, password))


async def _login_impl(username: str, password: str):
    async with _client() as c:
        r = await c.post(
            "/api/auth/login", json={"username": username, "password": password}
        )
        _fail_on_error(r)
        data = r.json()
        click.echo(data["token"])
        click.secho(f"Expires at {data['expires_at']}", fg="cyan", err=True)


@main.command()
@click.option("--token", help="Session token (or set INKWELL_TOKEN)")
def me(token: Optional[str]):
    """Show the account the token belongs to."""
    _run(_me_impl(_require_token(token)))


async def _me_impl(token: str):
    async with _client() as c:
        r = await c.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        _fail_on_error(r)
        click.echo(_pretty_json(r.json()))


@main.command()
def posts():
    """List posts, newest first."""
    _run(_posts_impl())


async def _posts_impl():
    async with _client() as c:
        r = await c.get("/api/v1/posts")
        _fail_on_error(r)
        rows = r.json()

        if not rows:
            click.echo("No posts yet.")
            return

        for row in rows:
            row["author_name"] = row.get("author", {}).get("username", "—")

        click.secho(f"Posts ({len(rows)}):", bold=True)
        click.echo()
        _print_table(rows, [
            ("ID", "id", 6),
            ("Author", "author_name", 16),
            ("Title", "title", 60),
        ])


@main.command()
@click.argument("title")
@click.argument("content")
@click.option("--token", help="Session token (or set INKWELL_TOKEN)")
def post(title: str, content: str, token: Optional[str]):
    """Create a post."""
    _run(_post_impl(title, content, _require_token(token)))


async def _post_impl(title: str, content: str, token: str):
    async with _client() as c:
        r = await c.post(
            "/api/v1/posts",
            json={"title": title, "content": content},
            headers={"Authorization": f"Bearer {token}"},
        )
        _fail_on_error(r)
        click.secho(f"Created post #{r.json()['post_id']}", fg="green")


if __name__ == "__main__":
    main()
