import click
from tabulate import tabulate

from taskcli.services import task_service
from taskcli.session import get_cli_user_id


@click.command('stats')
def task_stats():
    """Show task counts by status and priority."""
    stats = task_service().get_task_statistics(get_cli_user_id())
    rows = [[f"status: {s.label}", n] for s, n in stats.by_status.items()]
    rows += [[f"priority: {p.label}", n] for p, n in stats.by_priority.items()]
    rows.append(["overdue", stats.overdue])
    rows.append(["total", stats.total])
    click.echo(tabulate(rows, headers=["Group", "Tasks"], tablefmt="simple"))
