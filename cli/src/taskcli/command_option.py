import click
from dotenv import load_dotenv

from taskcli.commands.init import init
from taskcli.commands.auth import register, login, logout, whoami
from taskcli.commands.task.click import task_group
from taskcli.config import get_config
from taskcli.log import setup_logging
from taskstore.errors import TaskStoreError

CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])


class TaskTrackGroup(click.Group):
    """Turns task store errors into one-line messages with a non-zero exit."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except TaskStoreError as e:
            hint = " (retry later)" if e.retryable else ""
            raise click.ClickException(f"{e}{hint}")


@click.group(cls=TaskTrackGroup, context_settings=CONTEXT_SETTINGS)
@click.option('--verbose', '-v', is_flag=True, help='Log debug output to stderr')
def cli(verbose):
    """Per-user task tracker."""
    load_dotenv()
    setup_logging("DEBUG" if verbose else get_config()['log_level'])


# Register commands
cli.add_command(init)
cli.add_command(register)
cli.add_command(login)
cli.add_command(logout)
cli.add_command(whoami)
cli.add_command(task_group)


def main():
    cli()


if __name__ == "__main__":
    main()
