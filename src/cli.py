"""Command-line interface loop for the task tracker.

Pure front end: reads commands, calls the TaskStore, prints outcomes.
The store is loaded by the caller and saved here exactly once, on exit.
"""
from typing import List, Optional

import click

from models import INTEGER_RE, NotFound, Task
from theme import color, status_color, HEADER_COLOR, ID_COLOR, EMPTY_COLOR, BOLD
from tracker import TaskStore, is_completed, is_pending

LIST_ALIASES = {
    '': 'all',
    'a': 'all',
    'all': 'all',
    'p': 'pending',
    'pending': 'pending',
    'd': 'done',
    'done': 'done',
    'completed': 'done',
}

LIST_TITLES = {
    'all': 'All tasks',
    'pending': 'Pending tasks',
    'done': 'Completed tasks',
}


def _parse_id(raw: str) -> Optional[int]:
    raw = raw.strip().rstrip('.')
    if not INTEGER_RE.fullmatch(raw) or int(raw) < 1:
        return None
    return int(raw)


def format_task(task: Task) -> str:
    text = str(task)
    head, sep, rest = text.partition(' | ')
    return color(head, ID_COLOR) + sep + color(rest, status_color(task.completed))


class CLI:
    def __init__(self, store: TaskStore):
        self.store: TaskStore = store

    def run(self) -> bool:
        """Main REPL loop; returns whether the final save succeeded."""
        try:
            while True:
                click.echo(color('\nTask Tracker: ', HEADER_COLOR, BOLD) + str(self.store))
                line = click.prompt('', prompt_suffix=': ', default='', show_default=False).strip()
                if not line:
                    continue
                lower = line.lower()
                if lower == 'help':
                    self._help()
                    continue
                if lower in ('exit', 'quit'):
                    break
                self._handle_command(line)
        except (KeyboardInterrupt, EOFError, click.Abort):
            click.echo('\nInterrupted.')
        return self._save()

    def _save(self) -> bool:
        if self.store.save():
            click.echo('Tasks saved. Goodbye.')
            return True
        click.echo('Warning: tasks could not be saved; changes from this session were not persisted.', err=True)
        return False

    # -------------------- command dispatch --------------------
    def _handle_command(self, line: str) -> None:
        tokens = line.split()
        cmd = tokens[0].lower()
        if cmd == 'add':
            self._cmd_add(line)
        elif cmd in ('ls', 'list'):
            self._cmd_ls(tokens)
        elif cmd in ('done', 'complete'):
            self._cmd_done(tokens)
        elif cmd in ('rm', 'remove', 'del'):
            self._cmd_rm(tokens)
        else:
            click.echo("Unknown command. Type 'help' for instructions.")

    # ---- individual command helpers ----
    def _cmd_add(self, line: str) -> None:
        description = line[len('add'):].strip()
        if not description:
            description = click.prompt('Enter task description', default='', show_default=False).strip()
        if not description:
            click.echo('Description required.')
            return
        task = self.store.add_task(description)
        click.echo('Task added.')
        click.echo(format_task(task))

    def _cmd_ls(self, tokens: List[str]) -> None:
        which = LIST_ALIASES.get(tokens[1].lower() if len(tokens) > 1 else '')
        if which is None:
            click.echo('Usage: ls [all|pending|done]')
            return
        if which == 'pending':
            tasks = self.store.list_filtered(is_pending)
        elif which == 'done':
            tasks = self.store.list_filtered(is_completed)
        else:
            tasks = self.store.list_all()
        click.echo(color(f'--- {LIST_TITLES[which]} ---', HEADER_COLOR, BOLD))
        if not tasks:
            click.echo(color('No tasks to show.', EMPTY_COLOR))
            return
        for task in tasks:
            click.echo(format_task(task))

    def _cmd_done(self, tokens: List[str]) -> None:
        task_id = self._id_argument(tokens, 'done <id>')
        if task_id is None:
            return
        result = self.store.mark_completed(task_id)
        if isinstance(result, NotFound):
            click.echo(str(result))
            return
        click.echo('Task updated.')
        click.echo(format_task(result))

    def _cmd_rm(self, tokens: List[str]) -> None:
        task_id = self._id_argument(tokens, 'rm <id>')
        if task_id is None:
            return
        result = self.store.delete_task(task_id)
        if isinstance(result, NotFound):
            click.echo(str(result))
            return
        click.echo(f'Task {task_id} removed.')

    def _id_argument(self, tokens: List[str], usage: str) -> Optional[int]:
        if len(tokens) > 2:
            click.echo(f'Usage: {usage}')
            return None
        raw = tokens[1] if len(tokens) == 2 else click.prompt('Enter task id', default='', show_default=False)
        task_id = _parse_id(raw)
        if task_id is None:
            click.echo('Invalid id.')
        return task_id

    # -------------------- help --------------------
    def _help(self) -> None:
        click.echo("Commands:")
        click.echo("  add                 Add a new task (prompts for description)")
        click.echo("  add <text...>       Shorthand add with inline description")
        click.echo("  ls [all|p|d]        List all, pending or completed tasks")
        click.echo("  done <id>           Mark a task as completed")
        click.echo("  rm <id>             Remove a task by id")
        click.echo("  help                Show this help")
        click.echo("  exit                Save and exit")
