import click

from .add import task_add
from .list import task_list
from .get import task_get
from .update import task_update
from .complete import task_complete, task_uncomplete
from .delete import task_delete
from .overdue import task_overdue
from .stats import task_stats
from .bulk import task_bulk_status, task_bulk_delete

@click.group('task')
def task_group():
    """Manage tasks."""
    pass

task_group.add_command(task_add)
task_group.add_command(task_list)
task_group.add_command(task_get)
task_group.add_command(task_update)
task_group.add_command(task_complete)
task_group.add_command(task_uncomplete)
task_group.add_command(task_delete)
task_group.add_command(task_overdue)
task_group.add_command(task_stats)
task_group.add_command(task_bulk_status)
task_group.add_command(task_bulk_delete)
