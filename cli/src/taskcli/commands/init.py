import click

from taskcli.config import get_database


@click.command('init')
def init():
    """Create the database tables."""
    db = get_database()
    db.create_schema()
    click.echo(f"Database ready at {db.engine.url.render_as_string(hide_password=True)}")
