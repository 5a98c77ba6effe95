import click

from taskcli.services import task_service
from taskcli.session import get_cli_user_id
from taskstore.entity.dto import TaskPriority, TaskStatus
from taskstore.entity.request import UpdateTaskRequest
from .common import PRIORITY_CHOICES, STATUS_CHOICES, parse_due


@click.command('update')
@click.argument('task_id', type=click.UUID)
@click.option('--title', '-t', default=None, help='New title')
@click.option('--desc', '-d', default=None, help='New description')
@click.option('--clear-desc', is_flag=True, help='Remove the description')
@click.option('--status', '-s', default=None, type=click.Choice(STATUS_CHOICES), help='New status')
@click.option('--priority', '-p', default=None, type=click.Choice(PRIORITY_CHOICES), help='New priority')
@click.option('--due', '-u', default=None, help='New due date (local time)')
@click.option('--clear-due', is_flag=True, help='Remove the due date')
def task_update(task_id, title, desc, clear_desc, status, priority, due, clear_due):
    """Update a task."""
    fields = {}
    if title is not None:
        fields['title'] = title
    if clear_desc:
        fields['description'] = None
    elif desc is not None:
        fields['description'] = desc
    if status is not None:
        fields['status'] = TaskStatus.from_name(status)
    if priority is not None:
        fields['priority'] = TaskPriority.from_name(priority)
    if clear_due:
        fields['due_date'] = None
    elif due is not None:
        fields['due_date'] = parse_due(due)

    if not fields:
        click.echo("No fields to update")
        return

    task = task_service().update_task(get_cli_user_id(), task_id, UpdateTaskRequest(**fields))
    click.echo(f"Updated task '{task.title}' ({task.id})")
