import click

from taskcli.services import task_service
from taskcli.session import get_cli_user_id


@click.command('delete')
@click.argument('task_id', type=click.UUID)
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation')
def task_delete(task_id, yes):
    """Delete a task."""
    if not yes:
        click.confirm(f"Delete task {task_id}?", abort=True)
    task_service().delete_task(get_cli_user_id(), task_id)
    click.echo(f"Deleted task {task_id}")
