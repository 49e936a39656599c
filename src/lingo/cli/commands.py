"""CLI commands for lingo.

Commands:
- init-db: Create the database schema
- seed: Load a YAML catalog/user seed file
- courses: List courses
- progress: Show a user's learning path, active lesson and subscription
- leaderboard: Show the top users by points
- serve: Run the Web API with uvicorn
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from lingo.auth.request_scope import request_scope
from lingo.db.database import get_db_path, init_db
from lingo.db.queries import (
    get_course_progress,
    get_courses,
    get_is_admin,
    get_lesson_percentage,
    get_top_ten_users,
    get_units,
    get_user_progress,
    get_user_subscription,
)
from lingo.db.seed import SeedError, seed_from_yaml

app = typer.Typer(
    name="lingo",
    help="Course progress, subscription and leaderboard queries for the lingo app.",
    no_args_is_help=True,
)

console = Console()

DbOption = typer.Option(None, "--db", help="Path to SQLite database")


def _open_db(db: str | None) -> None:
    """Initialize the database at ``db`` or the configured path."""
    init_db(Path(db).expanduser() if db else None)


@app.command(name="init-db")
def init_db_command(db: str | None = DbOption) -> None:
    """Create the database schema."""
    _open_db(db)
    console.print(f"[green]✓ Database ready[/green] [dim]{get_db_path()}[/dim]")


@app.command()
def seed(
    file: str = typer.Argument(..., help="Path to YAML seed file"),
    reset: bool = typer.Option(False, "--reset", "-r", help="Delete existing data first"),
    db: str | None = DbOption,
) -> None:
    """Load courses, users and admins from a YAML seed file."""
    _open_db(db)

    try:
        result = seed_from_yaml(Path(file).expanduser(), reset=reset)
    except SeedError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    console.print("[green]✓ Seed loaded[/green]")
    console.print(
        f"  [dim]courses:[/dim] {result.courses}  [dim]units:[/dim] {result.units}  "
        f"[dim]lessons:[/dim] {result.lessons}  [dim]challenges:[/dim] {result.challenges}"
    )
    console.print(f"  [dim]users:[/dim] {result.users}  [dim]admins:[/dim] {result.admins}")


@app.command()
def courses(db: str | None = DbOption) -> None:
    """List courses."""
    _open_db(db)

    with request_scope():
        all_courses = get_courses()

    if not all_courses:
        console.print("[yellow]No courses found[/yellow]")
        return

    table = Table(title="Courses")
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Image")
    for course in all_courses:
        table.add_row(str(course.id), course.title, course.image_src)
    console.print(table)


@app.command()
def progress(
    user: str = typer.Option(..., "--user", "-u", help="User ID"),
    db: str | None = DbOption,
) -> None:
    """Show a user's learning path and active lesson."""
    _open_db(db)

    with request_scope(user):
        user_progress = get_user_progress()
        if user_progress is None:
            console.print(f"[red]✗ No progress found for user '{user}'[/red]")
            raise typer.Exit(code=1)

        units = get_units()
        course_progress = get_course_progress()
        percentage = get_lesson_percentage()
        subscription = get_user_subscription()
        is_admin = get_is_admin()

    course_title = (
        user_progress.active_course.title if user_progress.active_course else "-"
    )
    console.print(f"[bold]{user_progress.user_name}[/bold] [dim]({user_progress.user_id})[/dim]")
    console.print(f"  [dim]course:[/dim] {course_title}")
    console.print(f"  [dim]points:[/dim] {user_progress.points}  [dim]hearts:[/dim] {user_progress.hearts}")

    if subscription is None:
        console.print("  [dim]subscription:[/dim] none")
    else:
        state = "[green]active[/green]" if subscription.is_active else "[yellow]lapsed[/yellow]"
        console.print(f"  [dim]subscription:[/dim] {state}")
    if is_admin:
        console.print("  [dim]role:[/dim] admin")

    active_id = course_progress.active_lesson_id if course_progress else None

    table = Table(title="Learning path")
    table.add_column("Unit")
    table.add_column("Lesson")
    table.add_column("Challenges", justify="right")
    table.add_column("Status")
    for unit in units:
        for lesson in unit.lessons:
            if lesson.id == active_id:
                status = f"[cyan]▶ active ({percentage}%)[/cyan]"
            elif lesson.completed:
                status = "[green]✓ completed[/green]"
            else:
                status = "[dim]locked[/dim]"
            table.add_row(unit.title, lesson.title, str(len(lesson.challenges)), status)
    console.print(table)

    if course_progress is not None and active_id is None:
        console.print("[green bold]🎉 All lessons completed![/green bold]")


@app.command()
def leaderboard(
    user: str = typer.Option(..., "--user", "-u", help="User ID making the request"),
    db: str | None = DbOption,
) -> None:
    """Show the top users by points."""
    _open_db(db)

    with request_scope(user):
        top_users = get_top_ten_users()

    table = Table(title="Leaderboard")
    table.add_column("#", justify="right")
    table.add_column("User")
    table.add_column("Points", justify="right")
    for rank, entry in enumerate(top_users, start=1):
        name = f"[bold]{entry.user_name}[/bold]" if entry.user_id == user else entry.user_name
        table.add_row(str(rank), name, str(entry.points))
    console.print(table)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
    db: str | None = DbOption,
) -> None:
    """Run the Web API."""
    import uvicorn

    _open_db(db)
    uvicorn.run("lingo.web.api:app", host=host, port=port)


if __name__ == "__main__":
    app()
