import click

from taskcli.services import task_service
from taskcli.session import get_cli_user_id


@click.command('complete')
@click.argument('task_id', type=click.UUID)
def task_complete(task_id):
    """Mark a task as completed."""
    task = task_service().complete_task(get_cli_user_id(), task_id)
    click.echo(f"Completed task '{task.title}' ({task.id})")


@click.command('uncomplete')
@click.argument('task_id', type=click.UUID)
def task_uncomplete(task_id):
    """Reopen a completed task (back to pending)."""
    task = task_service().uncomplete_task(get_cli_user_id(), task_id)
    click.echo(f"Reopened task '{task.title}' ({task.id})")
