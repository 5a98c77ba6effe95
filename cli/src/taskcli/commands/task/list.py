import click
from tabulate import tabulate

from taskcli.services import task_service
from taskcli.session import get_cli_user_id
from taskcli.time_util import utc_to_local
from taskstore.entity.dto import MAX_PAGE_LIMIT, Pagination, TaskFilter, TaskPriority, TaskStatus
from .common import PRIORITY_CHOICES, STATUS_CHOICES, parse_due


def print_tasks(tasks):
    if not tasks:
        click.echo("No tasks found")
        return
    table = []
    for t in tasks:
        table.append([
            str(t.id),
            t.title,
            t.status.label,
            t.priority.label,
            utc_to_local(t.due_date),
        ])
    click.echo(tabulate(table, headers=["ID", "Title", "Status", "Priority", "Due"], tablefmt="simple"))


@click.command('list')
@click.option('--status', '-s', default=None, type=click.Choice(STATUS_CHOICES), help='Filter by status')
@click.option('--priority', '-p', default=None, type=click.Choice(PRIORITY_CHOICES), help='Filter by priority')
@click.option('--search', '-q', default=None, help='Text to find in title or description')
@click.option('--due-before', default=None, help='Only tasks due before this local date/time')
@click.option('--due-after', default=None, help='Only tasks due after this local date/time')
@click.option('--overdue', is_flag=True, help='Only unfinished tasks past their due date')
@click.option('--offset', default=0, type=click.IntRange(min=0), help='Skip this many tasks')
@click.option('--limit', '-l', default=20, type=click.IntRange(min=1), help=f'Max results (up to {MAX_PAGE_LIMIT})')
def task_list(status, priority, search, due_before, due_after, overdue, offset, limit):
    """List tasks, newest first."""
    user_id = get_cli_user_id()
    task_filter = TaskFilter(
        status=TaskStatus.from_name(status) if status else None,
        priority=TaskPriority.from_name(priority) if priority else None,
        search=search,
        due_before=parse_due(due_before),
        due_after=parse_due(due_after),
        overdue_only=overdue,
    )
    tasks = task_service().get_tasks(user_id, task_filter, Pagination(offset=offset, limit=limit))
    print_tasks(tasks)
