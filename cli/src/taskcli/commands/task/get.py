import click

from taskcli.services import task_service
from taskcli.session import get_cli_user_id
from .common import echo_task


@click.command('get')
@click.argument('task_id', type=click.UUID)
def task_get(task_id):
    """Show task details."""
    task = task_service().get_task(get_cli_user_id(), task_id)
    echo_task(task)
