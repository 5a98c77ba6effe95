import click

from taskcli.services import task_service
from taskcli.session import get_cli_user_id
from taskstore.entity.dto import TaskStatus
from .common import STATUS_CHOICES


@click.command('bulk-status')
@click.argument('status', type=click.Choice(STATUS_CHOICES))
@click.argument('task_ids', nargs=-1, required=True, type=click.UUID)
def task_bulk_status(status, task_ids):
    """Set the status of several tasks at once."""
    updated = task_service().bulk_update_status(get_cli_user_id(), task_ids, TaskStatus.from_name(status))
    click.echo(f"Updated {len(updated)}/{len(task_ids)} tasks")


@click.command('bulk-delete')
@click.argument('task_ids', nargs=-1, required=True, type=click.UUID)
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation')
def task_bulk_delete(task_ids, yes):
    """Delete several tasks at once."""
    if not yes:
        click.confirm(f"Delete {len(task_ids)} tasks?", abort=True)
    deleted = task_service().bulk_delete_tasks(get_cli_user_id(), task_ids)
    click.echo(f"Deleted {deleted}/{len(task_ids)} tasks")
