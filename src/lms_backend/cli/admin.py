"""
Out-of-band administration.

These commands talk to the database directly with elevated rights; they are
how the first admin gets its role.
"""

import click
from sqlalchemy.exc import IntegrityError

from lms_backend.database import get_session_factory
from lms_backend.errors import BootstrapFailure
from lms_backend.model.role import AppRole, UserRole
from lms_backend.services.bootstrap import PrincipalCreatedEvent, bootstrap_account

ROLE_CHOICE = click.Choice([role.value for role in AppRole])

@click.command()
@click.argument("user_id", type=click.UUID)
@click.argument("role", type=ROLE_CHOICE)
def grant_role(user_id, role):
    with get_session_factory()() as db:
        db.add(UserRole(user_id=user_id, role=AppRole(role)))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise click.ClickException(f"{user_id} already holds role '{role}'")

    click.echo(f"Granted '{role}' to {user_id}")

@click.command()
@click.argument("user_id", type=click.UUID)
@click.argument("role", type=ROLE_CHOICE)
def revoke_role(user_id, role):
    with get_session_factory()() as db:
        grant = db.query(UserRole).filter(UserRole.user_id == user_id, UserRole.role == AppRole(role)).first()

        if grant is None:
            raise click.ClickException(f"{user_id} does not hold role '{role}'")

        db.delete(grant)
        db.commit()

    click.echo(f"Revoked '{role}' from {user_id}")

@click.command()
@click.argument("user_id", type=click.UUID)
@click.option("--full-name", "full_name", default=None)
@click.option("--email", "email", default=None)
def bootstrap(user_id, full_name, email):
    """Replay a missed signup event."""
    event = PrincipalCreatedEvent(
        id=user_id,
        email=email,
        raw_user_meta_data={"full_name": full_name} if full_name else {}
    )

    with get_session_factory()() as db:
        try:
            bootstrap_account(db, event)
        except BootstrapFailure as e:
            raise click.ClickException(str(e))

    click.echo(f"Bootstrapped {user_id}")

@click.group()
def admin():
    pass

admin.add_command(grant_role,"grant-role")
admin.add_command(revoke_role,"revoke-role")
admin.add_command(bootstrap,"bootstrap")
