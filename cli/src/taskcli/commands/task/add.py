import click

from taskcli.services import task_service
from taskcli.session import get_cli_user_id
from taskstore.entity.dto import TaskPriority
from taskstore.entity.request import CreateTaskRequest
from .common import PRIORITY_CHOICES, parse_due


@click.command('add')
@click.argument('title')
@click.option('--desc', '-d', default=None, help='Description')
@click.option('--priority', '-p', default=None, type=click.Choice(PRIORITY_CHOICES), help='Priority (default medium)')
@click.option('--due', '-u', default=None, help='Due date (YYYY-MM-DD or YYYY-MM-DD HH:MM, local time)')
def task_add(title, desc, priority, due):
    """Add a new task."""
    user_id = get_cli_user_id()
    request = CreateTaskRequest(
        title=title,
        description=desc,
        priority=TaskPriority.from_name(priority) if priority else None,
        due_date=parse_due(due),
    )
    task = task_service().create_task(user_id, request)
    click.echo(f"Created task '{task.title}' ({task.id})")
