"""Account commands: register, login, logout, whoami."""

import click

from taskcli.services import user_service
from taskcli.session import get_cli_user_id, remove_session, save_session
from taskstore.entity.request import RegisterRequest


@click.command('register')
@click.option('--username', '-u', prompt=True, help='Username (3-50 letters, digits, underscores)')
@click.option('--email', '-e', prompt=True, help='Email address')
@click.password_option('--password', '-p', help='Password (8+ chars, letters and digits)')
def register(username, email, password):
    """Create a new account."""
    user = user_service().register(RegisterRequest(username=username, email=email, password=password))
    click.echo(f"Registered {user.username} ({user.id})")


@click.command('login')
@click.option('--username', '-u', prompt=True, help='Username')
@click.option('--password', '-p', prompt=True, hide_input=True, help='Password')
def login(username, password):
    """Verify credentials and remember the user on this machine."""
    user = user_service().authenticate(username, password)
    save_session(user.id, user.username)
    click.echo(f"Logged in as {user.username}")


@click.command('logout')
def logout():
    """Forget the local session."""
    if remove_session():
        click.echo("Logged out")
    else:
        click.echo("Not logged in")


@click.command('whoami')
def whoami():
    """Show the logged-in user."""
    user = user_service().get_profile(get_cli_user_id())
    click.echo(f"Username:  {user.username}")
    click.echo(f"Email:     {user.email}")
    click.echo(f"ID:        {user.id}")
