import click

from taskcli.services import task_service
from taskcli.session import get_cli_user_id
from .list import print_tasks


@click.command('overdue')
def task_overdue():
    """List unfinished tasks past their due date."""
    print_tasks(task_service().get_overdue_tasks(get_cli_user_id()))
