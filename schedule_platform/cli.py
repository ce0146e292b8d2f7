"""Command-line interface for schedule_platform.

Server commands:
- serve: Run the API with uvicorn
- init-db: Create the database tables

Client commands (one per screen of the app):
- signup / login / logout / whoami
- todo list|add|edit|delete
- goal list|add|complete
- feed, like, likes
- comment list|add|delete

Example:
    $ schedule serve --port 5000
    $ schedule signup --name Alice --email a@x.com
    $ schedule login --email a@x.com
    $ schedule todo add --date 2024-01-01 --content "buy milk"
    $ schedule feed --page 2
"""

import sys
from datetime import date as date_cls
from functools import wraps
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from schedule_platform.client import (
    ApiError,
    ClientError,
    FormError,
    ScheduleClient,
    SessionExpiredError,
    select_token_storage,
)
from schedule_platform.client import forms
from schedule_platform.config import get_client_settings, get_settings
from schedule_platform.database import Database
from schedule_platform.logging import setup_logging

app = typer.Typer(
    name="schedule",
    help="Social schedule planner: API server and terminal client",
    add_completion=False,
)
todo_app = typer.Typer(help="Your todos for a day")
goal_app = typer.Typer(help="Your goals for a day")
comment_app = typer.Typer(help="Comments on a todo")
app.add_typer(todo_app, name="todo")
app.add_typer(goal_app, name="goal")
app.add_typer(comment_app, name="comment")

console = Console()


# =============================================================================
# Helper Functions
# =============================================================================


def get_client() -> ScheduleClient:
    """Client wired to the configured server and token store."""
    settings = get_client_settings()
    return ScheduleClient(settings.api_url, select_token_storage(settings))


def handle_errors(func):
    """Turn client failures into a one-line message and exit code 1."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SessionExpiredError as e:
            console.print(f"[yellow]{e.message}[/yellow]")
            console.print("Run [bold]schedule login[/bold] to sign in.")
            raise typer.Exit(code=1)
        except FormError as e:
            for message in e.errors.values():
                console.print(f"[red]{message}[/red]")
            raise typer.Exit(code=1)
        except ApiError as e:
            console.print(f"[red]{e.message}[/red]")
            raise typer.Exit(code=1)
        except ClientError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(code=1)

    return wrapper


def today() -> str:
    return date_cls.today().isoformat()


def todo_table(todos: list, title: str, social: bool = False) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan", justify="right")
    if social:
        table.add_column("Author", style="magenta")
        table.add_column("Date")
    table.add_column("Content")
    table.add_column("Image", style="dim")
    if social:
        table.add_column("Likes", justify="right")
        table.add_column("Comments", justify="right")

    for todo in todos:
        row = [str(todo["id"])]
        if social:
            row += [todo["userName"], todo["date"]]
        row += [todo["content"] or "", todo.get("imageUrl") or ""]
        if social:
            heart = "♥ " if todo.get("isLiked") else ""
            row += [f"{heart}{todo.get('likeCount', 0)}", str(todo.get("commentCount", 0))]
        table.add_row(*row)
    return table


# =============================================================================
# Server Commands
# =============================================================================


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind (default from HOST)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind (default from PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the API server."""
    settings = get_settings()
    uvicorn.run(
        "schedule_platform.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@app.command("init-db")
def init_db() -> None:
    """Create all tables in the configured database."""
    settings = get_settings()
    setup_logging(level=settings.log_level, json_logs=settings.log_json)
    database = Database(settings.sqlalchemy_url, pool_size=settings.db_pool_size)
    try:
        if not database.check_connection():
            console.print("[red]Could not connect to the database. Check the DB_* settings.[/red]")
            raise typer.Exit(code=1)
        database.create_all()
    finally:
        database.dispose()
    console.print("[green]✓[/green] Database tables are ready")


# =============================================================================
# Account Commands
# =============================================================================


@app.command()
@handle_errors
def signup(
    name: str = typer.Option(..., "--name", prompt=True),
    email: str = typer.Option(..., "--email", prompt=True),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
    confirm_password: str = typer.Option(..., "--confirm-password", prompt="Confirm password", hide_input=True),
) -> None:
    """Create an account."""
    forms.validate_signup(name, email, password, confirm_password)
    get_client().signup(name, email, password)
    console.print("[green]✓[/green] Sign up complete. You can now log in.")


@app.command()
@handle_errors
def login(
    email: str = typer.Option(..., "--email", prompt=True),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
) -> None:
    """Log in and remember the session."""
    forms.validate_login(email, password)
    user = get_client().login(email, password)
    console.print(f"[green]✓[/green] Logged in as [bold]{user['name']}[/bold]")


@app.command()
def logout() -> None:
    """Forget the stored session."""
    get_client().logout()
    console.print("Logged out.")


@app.command()
@handle_errors
def whoami() -> None:
    """Show the logged-in user."""
    user = get_client().me()
    console.print(f"{user['name']} <{user['email']}> (id {user['id']})")


# =============================================================================
# Todo Commands
# =============================================================================


@todo_app.command("list")
@handle_errors
def todo_list(date: Optional[str] = typer.Option(None, "--date", "-d", help="YYYY-MM-DD (default today)")) -> None:
    """List your todos for a day."""
    day = date or today()
    todos = get_client().list_todos(day)
    if not todos:
        console.print(f"No todos on {day}.")
        return
    console.print(todo_table(todos, title=f"Todos for {day}"))


@todo_app.command("add")
@handle_errors
def todo_add(
    date: Optional[str] = typer.Option(None, "--date", "-d", help="YYYY-MM-DD (default today)"),
    content: Optional[str] = typer.Option(None, "--content", "-c"),
    image: Optional[Path] = typer.Option(None, "--image", "-i", help="jpeg/png/gif up to 5MB"),
) -> None:
    """Add a todo with text, an image, or both."""
    forms.validate_todo(content, image)
    todo_id = get_client().create_todo(date or today(), content=content, image=image)
    console.print(f"[green]✓[/green] Todo {todo_id} added")


@todo_app.command("edit")
@handle_errors
def todo_edit(
    todo_id: int = typer.Argument(...),
    content: Optional[str] = typer.Option(None, "--content", "-c"),
    image: Optional[Path] = typer.Option(None, "--image", "-i", help="Replaces the current image"),
) -> None:
    """Change a todo's text or image."""
    forms.validate_todo(content, image)
    get_client().update_todo(todo_id, content=content, image=image)
    console.print(f"[green]✓[/green] Todo {todo_id} updated")


@todo_app.command("delete")
@handle_errors
def todo_delete(todo_id: int = typer.Argument(...)) -> None:
    get_client().delete_todo(todo_id)
    console.print(f"[green]✓[/green] Todo {todo_id} deleted")


# =============================================================================
# Goal Commands
# =============================================================================


@goal_app.command("list")
@handle_errors
def goal_list(date: Optional[str] = typer.Option(None, "--date", "-d", help="YYYY-MM-DD (default today)")) -> None:
    """List your goals for a day."""
    day = date or today()
    goals = get_client().list_goals(day)
    if not goals:
        console.print(f"No goals on {day}.")
        return

    table = Table(title=f"Goals for {day}")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Goal")
    table.add_column("Done")
    for goal in goals:
        done = "[green]✓[/green]" if goal["isCompleted"] else ""
        table.add_row(str(goal["id"]), goal["title"], done)
    console.print(table)


@goal_app.command("add")
@handle_errors
def goal_add(
    title: str = typer.Argument(...),
    date: Optional[str] = typer.Option(None, "--date", "-d", help="YYYY-MM-DD (default today)"),
) -> None:
    forms.validate_goal(title)
    goal_id = get_client().create_goal(title, date or today())
    console.print(f"[green]✓[/green] Goal {goal_id} added")


@goal_app.command("complete")
@handle_errors
def goal_complete(goal_id: int = typer.Argument(...)) -> None:
    """Mark a goal as achieved."""
    get_client().complete_goal(goal_id)
    console.print("🎉 Goal achieved!")


# =============================================================================
# Feed, Likes and Comments
# =============================================================================


@app.command()
@handle_errors
def feed(
    page: int = typer.Option(1, "--page", "-p", min=1),
    limit: int = typer.Option(10, "--limit", "-n", min=1, max=50),
) -> None:
    """Browse other people's todos."""
    data = get_client().feed(page=page, limit=limit)
    if not data["todos"]:
        console.print("Nothing in the feed yet.")
        return
    title = f"Feed (page {data['currentPage']} of {data['totalPages']}, {data['total']} todos)"
    console.print(todo_table(data["todos"], title=title, social=True))


@app.command()
@handle_errors
def like(todo_id: int = typer.Argument(...)) -> None:
    """Like a todo, or undo your like."""
    liked = get_client().toggle_like(todo_id)
    console.print("♥ Liked" if liked else "Like removed")


@app.command()
@handle_errors
def likes(todo_id: int = typer.Argument(...)) -> None:
    """Show how many likes a todo has."""
    status = get_client().like_status(todo_id)
    suffix = " (including yours)" if status["isLiked"] else ""
    console.print(f"{status['likeCount']} likes{suffix}")


@comment_app.command("list")
@handle_errors
def comment_list(todo_id: int = typer.Argument(...)) -> None:
    comments = get_client().list_comments(todo_id)
    if not comments:
        console.print("No comments yet.")
        return
    for comment in comments:
        console.print(f"[cyan]#{comment['id']}[/cyan] [bold]{comment['userName']}[/bold]: {comment['content']}")


@comment_app.command("add")
@handle_errors
def comment_add(todo_id: int = typer.Argument(...), content: str = typer.Argument(...)) -> None:
    forms.validate_comment(content)
    comment = get_client().add_comment(todo_id, content)
    console.print(f"[green]✓[/green] Comment {comment['id']} added")


@comment_app.command("delete")
@handle_errors
def comment_delete(comment_id: int = typer.Argument(...)) -> None:
    get_client().delete_comment(comment_id)
    console.print(f"[green]✓[/green] Comment {comment_id} deleted")


def main() -> None:
    app()


if __name__ == "__main__":
    sys.exit(main())
