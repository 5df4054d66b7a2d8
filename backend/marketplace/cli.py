import click
from flask.cli import AppGroup

from marketplace.models.user_role import APP_ROLES
from marketplace.services import role_service
from marketplace.utils.errors import ApiError

roles_cli = AppGroup("roles", help="Manage user roles.")


@roles_cli.command("grant")
@click.argument("user_id")
@click.argument("role", type=click.Choice(APP_ROLES))
def grant_role(user_id: str, role: str):
    """Assign ROLE to USER_ID (bootstraps the first admin)."""
    try:
        role_service.add_role(user_id, role)
    except ApiError as err:
        raise click.ClickException(err.message)
    click.echo(f"Role {role} granted to {user_id}")


@roles_cli.command("list")
@click.argument("user_id")
def list_roles(user_id: str):
    for role in role_service.roles_for(user_id):
        click.echo(role)


def register_cli(app) -> None:
    app.cli.add_command(roles_cli)
