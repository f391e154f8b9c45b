"""
CLI view formatters using Rich for pretty console output.

Handles display of workouts, weight changes, users, programs and history.
"""

from collections.abc import Mapping

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.models import LIFT_ORDER, Lift, LiftName, Program, SetType, Workout

console = Console()


def format_weight(weight: float) -> str:
    """Format a weight without a trailing .0 for whole numbers: 135, 97.5."""
    if weight == int(weight):
        return str(int(weight))
    return f"{weight:.1f}"


def format_set(s, index: int) -> str:
    """
    Format one set as a single line.

    Warmups show reps and weight only; working sets are numbered by index
    within the working block and AMRAP sets carry a "+" and a tag.
    """
    if s.set_type is SetType.WARMUP:
        return f"{s.target_reps} reps @ {format_weight(s.weight)} lbs"
    if s.set_type is SetType.AMRAP:
        return f"Set {index}: {s.target_reps}+ reps @ {format_weight(s.weight)} lbs (AMRAP)"
    return f"Set {index}: {s.target_reps} reps @ {format_weight(s.weight)} lbs"


def _print_lift(lift: Lift) -> None:
    console.print(f"[bold]{lift.lift_name.display_name}:[/bold]")

    warmups = lift.warmup_sets
    if warmups:
        console.print("  [dim]Warmup:[/dim]")
        for s in warmups:
            console.print(f"    {format_set(s, s.order)}")

    console.print("  Working Sets:")
    for i, s in enumerate(lift.working_sets, 1):
        line = format_set(s, i)
        if s.set_type is SetType.AMRAP:
            line = f"[cyan]{line}[/cyan]"
        console.print(f"    {line}")
    console.print()


def print_workout(workout: Workout) -> None:
    """
    Print a prescribed workout grouped by lift.

    Args:
        workout: Workout to display
    """
    console.print(f"[bold cyan]Day {workout.day} Workout[/bold cyan]")
    console.print("================")
    console.print()
    for lift in workout.exercises:
        _print_lift(lift)


def print_weight_changes(old: Mapping[LiftName, float], new: Mapping[LiftName, float]) -> None:
    """
    Print lifts whose working weight changed, in a fixed lift order.

    Nothing is printed when no weight changed.
    """
    changed = [
        lift for lift in LIFT_ORDER
        if lift in old and lift in new and old[lift] != new[lift]
    ]
    if not changed:
        return

    console.print()
    console.print("[bold]Weight Updates:[/bold]")
    for lift in changed:
        diff = new[lift] - old[lift]
        sign = "+" if diff > 0 else ""
        style = "green" if diff > 0 else "yellow"
        console.print(
            f"{lift.display_name}: {format_weight(old[lift])} → "
            f"[{style}]{format_weight(new[lift])}[/{style}] lbs ({sign}{diff:.1f})"
        )


def print_workout_summary(workout: Workout, next_day: int) -> None:
    """Print the logged workout's AMRAP results and the next day."""
    console.print()
    for lift in workout.exercises:
        amrap = lift.amrap_set()
        if amrap is None:
            continue
        status = "" if amrap.is_complete() else " [red](failed)[/red]"
        console.print(
            f"  {lift.lift_name.display_name}: {amrap.actual_reps} reps "
            f"@ {format_weight(amrap.weight)} lbs{status}"
        )
    print_success("Workout logged successfully!")
    console.print(f"Next workout: Day {next_day}")


def format_history_table(workouts: list[Workout]) -> Table:
    """
    Create a Rich table of logged workouts.

    Args:
        workouts: Workouts to display, oldest first

    Returns:
        Rich Table object
    """
    table = Table(title="Workout History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Day", justify="right", style="magenta")
    table.add_column("AMRAP results", style="bold")

    for i, workout in enumerate(workouts, 1):
        results = []
        for lift in workout.exercises:
            amrap = lift.amrap_set()
            if amrap is not None:
                results.append(
                    f"{lift.lift_name.display_name} {format_weight(amrap.weight)}x{amrap.actual_reps}"
                )
        table.add_row(
            str(i),
            workout.entered_at.astimezone().strftime("%Y-%m-%d"),
            str(workout.day),
            ", ".join(results) or "-",
        )

    return table


def print_history(workouts: list[Workout]) -> None:
    """
    Print logged workouts.

    Args:
        workouts: Workouts to display
    """
    if not workouts:
        console.print("[yellow]No workouts logged yet.[/yellow]")
        return
    console.print(format_history_table(workouts))


def print_users(usernames: list[str], current: str | None) -> None:
    """Print all users, marking the current one with an asterisk."""
    console.print("Users:")
    for name in usernames:
        marker = "*" if current is not None and name == current else " "
        console.print(f"  {marker} {escape(name)}")
    console.print()
    if current is not None:
        console.print(f"* Current user: {escape(current)}")
    else:
        print_info("No current user set. Use 'greyskull user switch <username>' to set one.")


def print_programs(programs: list[Program]) -> None:
    """Print a numbered list of programs with their cycle length."""
    console.print("Available programs:")
    for i, program in enumerate(programs, 1):
        console.print(
            f"  {i}. {escape(program.name)} "
            f"[dim](v{escape(program.version)}, {program.cycle_length}-day cycle)[/dim]"
        )


def print_program_start(program: Program) -> None:
    """Print confirmation and a preview of day 1."""
    print_success(f"Program started! {program.name}")
    day_one = program.workout_for_day(1)
    names = ", ".join(lt.lift_name.display_name for lt in day_one.lifts)
    console.print(f"Day 1 will be: {names}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{escape(message)}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {escape(message)}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{escape(message)}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise (including closed stdin)
    """
    try:
        response = console.input(f"{escape(message)} \\[y/N]: ")
    except EOFError:
        console.print()
        return False
    return response.lower() in ("y", "yes")
