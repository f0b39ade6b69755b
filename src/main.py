"""Main entry point for the task tracker.

Builds the storage -> store -> console chain explicitly; nothing is shared
through module globals.
"""
import click

from cli import CLI
from logging_setup import setup_logging
from storage import Storage, TASKS_FILE
from tracker import TaskStore

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')


@click.command()
@click.option('--file', 'tasks_file', type=click.Path(dir_okay=False), default=str(TASKS_FILE),
              envvar='TRACKER_FILE', show_default=True, help='Task file to load and save.')
@click.option('--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False), default='WARNING',
              envvar='TRACKER_LOG_LEVEL', show_default=True, help='Console log level.')
@click.option('--log-file', type=click.Path(dir_okay=False), default=None,
              envvar='TRACKER_LOG_FILE', help='Also write a full debug log here.')
def main(tasks_file: str, log_level: str, log_file: str) -> None:
    """Interactive single-user task tracker."""
    setup_logging(console_level=log_level.upper(), log_file=log_file)
    store = TaskStore(Storage(tasks_file))
    store.load()
    if not CLI(store).run():
        raise SystemExit(1)


if __name__ == "__main__":
    main()
