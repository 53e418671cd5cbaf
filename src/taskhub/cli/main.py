"""TaskHub CLI — run the server and bootstrap the database.

Usage:
    taskhub serve                                    # Run the API with uvicorn
    taskhub init-db                                  # Create missing tables
    taskhub create-user -n Ada -e ada@x.io -r admin  # Add a user (prompts for password)
    taskhub users                                    # List users

create-user is how the first admin is made when self-registration is
capped below admin (TASKHUB_REGISTRATION_MAX_ROLE).
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import sys
from typing import Optional

import click

from taskhub import __version__
from taskhub.auth.password import PasswordHasher
from taskhub.auth.roles import Role
from taskhub.config import Settings
from taskhub.db.engine import build_engine, build_session_factory, create_tables
from taskhub.errors import DuplicateError
from taskhub.services.user_service import UserService

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
        # No running loop — normal CLI invocation
        return asyncio.run(coro)
    else:
        # Already inside an event loop (e.g. test runner) — run in a thread
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _settings(database_url: Optional[str]) -> Settings:
    if database_url:
        return Settings(database_url=database_url)
    return Settings()


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="taskhub")
def main():
    """TaskHub — project and task tracking with role-based access control."""


@main.command()
@click.option("--host", default=None, help="Bind address (default: TASKHUB_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: TASKHUB_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "taskhub.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("init-db")
@click.option("--database-url", help="Override TASKHUB_DATABASE_URL")
def init_db(database_url: Optional[str]):
    """Create any missing tables."""
    settings = _settings(database_url)
    _run(_init_db_impl(settings))
    click.secho("Database ready.", fg="green")


async def _init_db_impl(settings: Settings):
    engine = build_engine(settings.database_url)
    try:
        await create_tables(engine)
    finally:
        await engine.dispose()


@main.command("create-user")
@click.option("--name", "-n", required=True)
@click.option("--email", "-e", required=True)
@click.option(
    "--role",
    "-r",
    type=click.Choice([r.value for r in Role]),
    default=Role.EMPLOYEE.value,
    show_default=True,
)
@click.password_option(help="Password (prompted if omitted)")
@click.option("--database-url", help="Override TASKHUB_DATABASE_URL")
def create_user(name: str, email: str, role: str, password: str, database_url: Optional[str]):
    """Create a user with any role (e.g. the first admin)."""
    settings = _settings(database_url)
    try:
        user_id = _run(_create_user_impl(settings, name, email, Role(role), password))
    except DuplicateError as e:
        click.secho(f"Error: {e.message}", fg="red", err=True)
        sys.exit(1)
    click.secho(f"Created {role} user #{user_id} <{email}>", fg="green")


async def _create_user_impl(
    settings: Settings, name: str, email: str, role: Role, password: str
) -> int:
    engine = build_engine(settings.database_url)
    try:
        await create_tables(engine)
        hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        async with build_session_factory(engine)() as session:
            user = await UserService(session).create(
                name=name,
                email=email,
                password_hash=hasher.hash(password),
                role=role,
            )
            return user.id
    finally:
        await engine.dispose()


@main.command()
@click.option("--database-url", help="Override TASKHUB_DATABASE_URL")
def users(database_url: Optional[str]):
    """List registered users."""
    settings = _settings(database_url)
    rows = _run(_users_impl(settings))
    if not rows:
        click.echo("No users.")
        return
    header = f"{'ID':<6}{'ROLE':<10}{'EMAIL':<32}NAME"
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        click.echo(f"{row['id']:<6}{row['role']:<10}{row['email'][:31]:<32}{row['name']}")


async def _users_impl(settings: Settings) -> list[dict]:
    engine = build_engine(settings.database_url)
    try:
        await create_tables(engine)
        async with build_session_factory(engine)() as session:
            return [
                {"id": u.id, "name": u.name, "email": u.email, "role": Role(u.role).value}
                for u in await UserService(session).list_users()
            ]
    finally:
        await engine.dispose()


if __name__ == "__main__":
    main()
