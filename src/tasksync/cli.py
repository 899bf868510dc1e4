"""tasksync CLI - task list synchronized with a REST backend."""

import json
import logging
import sys

import click

from .core.tasks import Priority, Task, count_completed, find_task
from .core.validation import ValidationError, ensure_valid
from .synchronizer import TaskSynchronizer
from .workflows import build_synchronizer

PRIORITY_CHOICE = click.Choice([p.value for p in Priority])


@click.group()
@click.version_option(package_name="tasksync")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """tasksync - Task list synchronized with a REST backend."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


def _task_line(task: Task) -> str:
    check = "x" if task.completed else " "
    marker = "!" if task.priority is Priority.HIGH else " "
    return f"[{check}] {marker} {task.title}  (#{task.id})"


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _fail_on_error(sync: TaskSynchronizer) -> None:
    if sync.state.error:
        _fail(sync.state.error)


def _show_tasks(tasks: tuple[Task, ...], as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps([t.to_dict() for t in tasks], indent=2))
        return

    if not tasks:
        click.echo("No tasks. Add one with 'tasksync add'.")
        return

    for task in tasks:
        click.echo(_task_line(task))
    done, total = count_completed(tasks)
    click.echo(f"\n{done}/{total} completed")


def _get_task(sync: TaskSynchronizer, task_id: int) -> Task:
    task = find_task(sync.items, task_id)
    if task is None:
        _fail(f"No task with id {task_id}")
    return task


@main.command("list")
@click.option("--sync", "do_sync", is_flag=True, help="Sync with the server first")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_tasks(do_sync: bool, as_json: bool):
    """List tasks."""
    sync = build_synchronizer()
    if do_sync:
        sync.sync_remote()
        _fail_on_error(sync)
    _show_tasks(sync.items, as_json)


@main.command("sync")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def sync_command(as_json: bool):
    """Fetch tasks from the server and merge them with local ones."""
    sync = build_synchronizer()
    result = sync.sync_remote()
    _fail_on_error(sync)

    if as_json:
        _show_tasks(sync.items, as_json=True)
        return

    if result.from_cache:
        click.echo(f"Server unreachable ({result.remote_error}); showing cached tasks.")
    else:
        click.echo(f"Synced at {sync.state.last_sync}.")
    _show_tasks(sync.items, as_json=False)


@main.command()
@click.argument("task_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def show(task_id: int, as_json: bool):
    """Show one task."""
    sync = build_synchronizer()
    task = _get_task(sync, task_id)

    if as_json:
        click.echo(json.dumps(task.to_dict(), indent=2))
        return

    click.echo(task.title)
    click.echo(f"  Status:   {'completed' if task.completed else 'in progress'}")
    click.echo(f"  Priority: {task.priority.value}")
    if task.description:
        click.echo(f"  {task.description}")
    click.echo(f"  Created:  {task.created_at or '-'}")
    if task.updated_at:
        click.echo(f"  Updated:  {task.updated_at}")
    click.echo(f"  Origin:   {task.origin.value}")


@main.command()
@click.argument("title")
@click.option("--description", "-d", default="", help="Task details (max 200 chars)")
@click.option("--priority", "-p", type=PRIORITY_CHOICE, default="low", show_default=True)
def add(title: str, description: str, priority: str):
    """Create a task."""
    try:
        draft = ensure_valid(title, description, priority)
    except ValidationError as e:
        _fail(str(e))

    sync = build_synchronizer()
    task = sync.create(draft.to_changes())
    _fail_on_error(sync)
    click.echo(f"Created: {_task_line(task)}")


@main.command()
@click.argument("task_id", type=int)
@click.option("--title", "-t", default=None)
@click.option("--description", "-d", default=None)
@click.option("--priority", "-p", type=PRIORITY_CHOICE, default=None)
@click.option("--completed/--pending", default=None, help="Set completion status")
def edit(task_id: int, title: str | None, description: str | None, priority: str | None, completed: bool | None):
    """Edit a task."""
    sync = build_synchronizer()
    task = _get_task(sync, task_id)

    try:
        draft = ensure_valid(
            title if title is not None else task.title,
            description if description is not None else task.description,
            priority or task.priority,
            task.completed if completed is None else completed,
        )
    except ValidationError as e:
        _fail(str(e))

    updated = sync.update(task_id, draft.to_changes())
    _fail_on_error(sync)
    click.echo(f"Updated: {_task_line(updated)}")


@main.command()
@click.argument("task_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def delete(task_id: int, yes: bool):
    """Delete a task."""
    sync = build_synchronizer()
    task = _get_task(sync, task_id)

    if not yes and not click.confirm(f"Delete '{task.title}'?"):
        click.echo("Cancelled.")
        return

    sync.delete(task_id)
    _fail_on_error(sync)
    click.echo(f"Deleted: {task.title}")


@main.command()
@click.argument("task_id", type=int)
def toggle(task_id: int):
    """Mark a task completed, or back to in progress."""
    sync = build_synchronizer()
    _get_task(sync, task_id)
    task = sync.toggle_completed(task_id)
    click.echo(_task_line(task))


if __name__ == "__main__":
    main()
