import click

from taskcli.time_util import parse_local, utc_to_local
from taskstore.entity.dto import TaskPriority, TaskStatus

STATUS_CHOICES = [s.label for s in TaskStatus]
PRIORITY_CHOICES = [p.label for p in TaskPriority]


def parse_due(value):
    if value is None:
        return None
    try:
        return parse_local(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def echo_task(task):
    click.echo(f"ID:        {task.id}")
    click.echo(f"Title:     {task.title}")
    click.echo(f"Status:    {task.status.label}")
    click.echo(f"Priority:  {task.priority.label}")
    click.echo(f"Due:       {utc_to_local(task.due_date)}")
    if task.description:
        click.echo(f"Desc:      {task.description}")
    if task.completed_at:
        click.echo(f"Completed: {utc_to_local(task.completed_at)}")
    click.echo(f"Created:   {utc_to_local(task.created_at)}")
    click.echo(f"Updated:   {utc_to_local(task.updated_at)}")
