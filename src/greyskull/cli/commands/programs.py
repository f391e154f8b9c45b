"""Program commands: list, start."""

import math
from typing import Annotated, Optional

import typer

from ...core.errors import ProgramNotFoundError
from ...core.models import LIFT_ORDER, LiftName, Program, UserProgram
from ...core.programs import list_programs
from .. import views
from ..app import (
    DOMAIN_ERRORS,
    ConfigDirOption,
    exit_with_error,
    get_store,
    parse_lift_values,
    program_app,
    prompt_input,
)


def _select_program(programs: list[Program], program_ref: str | None) -> Program:
    """
    Pick a program by id or name, or interactively when several exist.

    Raises:
        ProgramNotFoundError: program_ref matches nothing
    """
    if program_ref is not None:
        for p in programs:
            if program_ref in (p.id, p.name) or program_ref.lower() == p.name.lower():
                return p
        raise ProgramNotFoundError(program_ref)

    if len(programs) == 1:
        return programs[0]

    views.print_programs(programs)
    while True:
        raw = prompt_input("Select a program (enter number): ")
        try:
            choice = int(raw)
        except ValueError:
            choice = 0
        if 1 <= choice <= len(programs):
            return programs[choice - 1]
        views.print_error(f"Enter a number between 1 and {len(programs)}")


def _weight_problem(weight: float) -> str | None:
    """Return why a starting weight is unusable, or None if it is fine."""
    if not math.isfinite(weight):
        return "must be a finite number"
    if weight <= 0:
        return "must be positive"
    return None


def _prompt_weight(lift: LiftName) -> float:
    """Prompt until the user enters a positive, finite starting weight."""
    while True:
        raw = prompt_input(f"Enter starting weight for {lift.display_name} (lbs): ")
        try:
            weight = float(raw)
        except ValueError:
            views.print_error("Invalid number. Please enter a valid weight.")
            continue
        problem = _weight_problem(weight)
        if problem is not None:
            views.print_error(f"Weight {problem}")
            continue
        return weight


@program_app.command("list")
def list_programs_cmd(config_dir: ConfigDirOption = None) -> None:
    """List available programs (bundled plus any in <config dir>/programs/)."""
    store = get_store(config_dir)
    views.print_programs(list_programs(store.programs_dir))


@program_app.command("start")
def start(
    program_ref: Annotated[
        Optional[str],
        typer.Option("--program", "-p", help="Program id or name (prompted if several exist)"),
    ] = None,
    weights: Annotated[
        Optional[list[str]],
        typer.Option("--weight", "-w", help="Starting weight as LIFT=LBS, e.g. squat=135 (repeatable)"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Replace an active program without prompting"),
    ] = False,
    config_dir: ConfigDirOption = None,
) -> None:
    """
    Start a program for the current user.

    Starting weights not given with --weight are prompted for. The program
    starts on day 1 with current weights equal to the starting weights.
    """
    store = get_store(config_dir)

    try:
        user = store.load_current_user()
        program = _select_program(list_programs(store.programs_dir), program_ref)
        given = parse_lift_values(weights)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    except DOMAIN_ERRORS as e:
        exit_with_error(e)

    has_active = user.current_program is not None and user.current_program in user.programs
    if has_active and not force and not views.confirm_action(
        "An active program exists. Start a new one?"
    ):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    for lift, weight in given.items():
        problem = _weight_problem(weight)
        if problem is not None:
            views.print_error(f"Starting weight for {lift.display_name} {problem}")
            raise typer.Exit(1)

    program_lifts = program.lift_names()
    starting: dict[LiftName, float] = {}
    for lift in LIFT_ORDER:
        if lift not in program_lifts:
            continue
        starting[lift] = given[lift] if lift in given else _prompt_weight(lift)

    user.start_program(
        UserProgram(
            user_id=user.id,
            program_id=program.id,
            starting_weights=dict(starting),
            current_weights=dict(starting),
        )
    )
    try:
        store.update(user)
    except DOMAIN_ERRORS as e:
        exit_with_error(e)

    views.print_program_start(program)
