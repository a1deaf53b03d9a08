"""CLI commands for back-office users and the HTTP server."""

from __future__ import annotations

import click
import uvicorn

from backoffice.application.create_admin import CreateAdminHandler
from backoffice.domain.exceptions import DomainException
from backoffice.infrastructure.api.app import create_app
from backoffice.infrastructure.api.auth import create_token
from backoffice.infrastructure.cli.context import CliContext


@click.command("create-admin")
@click.option("--name", required=True)
@click.option("--email", required=True)
@click.option(
    "--role",
    type=click.Choice(["admin", "super-admin"]),
    default="admin",
    show_default=True,
)
@click.pass_obj
def user_create_admin(ctx: CliContext, name: str, email: str, role: str) -> None:
    """Register a back-office account."""
    try:
        user = CreateAdminHandler(ctx.repos.users).handle(name=name, email=email, role=role)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"User {user.id} <{user.email}> created as {user.role.value}")


@click.command("token")
@click.argument("email")
@click.pass_obj
def user_token(ctx: CliContext, email: str) -> None:
    """Print a bearer token for an existing user."""
    user = ctx.repos.users.get_by_email(email)
    if user is None:
        raise click.ClickException(f"User '{email}' not found")
    if not user.can_manage_store:
        raise click.ClickException(f"User '{email}' cannot manage the store")

    click.echo(create_token(user, ctx.settings))


@click.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.pass_obj
def serve(ctx: CliContext, host: str, port: int) -> None:
    """Run the HTTP API."""
    app = create_app(settings=ctx.settings, repositories=ctx.repos)
    uvicorn.run(app, host=host, port=port, log_level=ctx.settings.log_level.lower())
