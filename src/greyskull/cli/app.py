"""Shared Typer app object, shared option types, and store utilities."""

import logging
import os
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..core.errors import GreyskullError, NoActiveProgramError
from ..core.models import LiftName, Program, User, UserProgram
from ..core.programs import get_program
from ..io.serializers import ValidationError
from ..io.user_store import NoCurrentUserError, StoreError, UserStore, get_default_config_dir
from . import views

# Errors a command reports to the user and exits 1 on
DOMAIN_ERRORS = (GreyskullError, StoreError, ValidationError)

_HINTS: dict[type, str] = {
    NoCurrentUserError: "Use 'greyskull user create' or 'greyskull user switch' first.",
    NoActiveProgramError: "Use 'greyskull program start' to begin a program.",
}

# Shared --config-dir option type used across all commands
ConfigDirOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config-dir",
        "-c",
        envvar="GREYSKULL_HOME",
        help="Data directory (default: $XDG_CONFIG_HOME/greyskull or ~/.config/greyskull)",
    ),
]

app = typer.Typer(
    name="greyskull",
    help="Command-line workout tracker for the Greyskull LP program.",
    no_args_is_help=False,
    invoke_without_command=True,
)

user_app = typer.Typer(help="Manage users.", no_args_is_help=True)
program_app = typer.Typer(help="Manage workout programs.", no_args_is_help=True)
workout_app = typer.Typer(help="Show and log workouts.", no_args_is_help=True)

app.add_typer(user_app, name="user")
app.add_typer(program_app, name="program")
app.add_typer(workout_app, name="workout")


def configure_logging(verbose: bool = False) -> None:
    """
    Route log records to stderr through Rich.

    GREYSKULL_LOG_LEVEL overrides the level; otherwise WARNING, or DEBUG
    with --verbose.
    """
    default = "DEBUG" if verbose else "WARNING"
    level_name = os.environ.get("GREYSKULL_LOG_LEVEL", default).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Track Greyskull LP workouts: users, programs, next workout and logging.
    """
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def get_store(config_dir: Path | None) -> UserStore:
    """Get user store from the given directory or the default location."""
    if config_dir is None:
        config_dir = get_default_config_dir()
    return UserStore(config_dir)


def exit_with_error(err: Exception) -> NoReturn:
    """Print a domain error (plus a hint where one helps) and exit 1."""
    views.print_error(str(err))
    for err_type, hint in _HINTS.items():
        if isinstance(err, err_type):
            views.print_info(hint)
            break
    raise typer.Exit(1)


def prompt_input(message: str) -> str:
    """
    Read one line of user input, stripped.

    Exits 1 with an error when stdin is closed (e.g. in a pipeline), since
    the missing value cannot be supplied interactively.
    """
    try:
        return views.console.input(message).strip()
    except EOFError:
        views.console.print()
        views.print_error("No input available; pass the value as an option instead.")
        raise typer.Exit(1) from None


def load_active(store: UserStore) -> tuple[User, UserProgram, Program]:
    """
    Load the current user, their active program run, and its template.

    Raises:
        NoCurrentUserError: No current user
        NoActiveProgramError: The user has not started a program
        CycleNotFoundError: The user's program pointer is dangling
        ProgramNotFoundError: The run's program template is unknown
    """
    user = store.load_current_user()
    user_program = user.active_program()
    program = get_program(user_program.program_id, store.programs_dir)
    return user, user_program, program


def parse_lift_values(values: list[str] | None, cast=float) -> dict[LiftName, float]:
    """
    Parse repeated LIFT=VALUE options, e.g. ``squat=135 bench_press=95``.

    Raises:
        ValueError: On a malformed entry or unknown lift
    """
    result: dict = {}
    for raw in values or []:
        name, sep, value = raw.partition("=")
        if not sep or not value.strip():
            raise ValueError(f"Expected LIFT=VALUE, got {raw!r}")
        lift = LiftName.parse(name)
        try:
            result[lift] = cast(value.strip())
        except ValueError:
            raise ValueError(f"Invalid number for {lift.display_name}: {value.strip()!r}") from None
    return result
