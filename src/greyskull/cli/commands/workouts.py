"""Workout commands: next, log, history."""

from typing import Annotated, Optional

import typer

from ...core.models import LiftName, Workout
from ...core.planner import advance_day, build_completed_workout, calculate_next_workout
from ...core.progression import calculate_progression
from .. import views
from ..app import (
    DOMAIN_ERRORS,
    ConfigDirOption,
    exit_with_error,
    get_store,
    load_active,
    parse_lift_values,
    prompt_input,
    workout_app,
)


def _prompt_amrap_reps(lift: LiftName, target: int, allow_failure: bool) -> int:
    """Prompt until the user enters a valid AMRAP rep count."""
    floor = 0 if allow_failure else 1
    while True:
        raw = prompt_input(
            f"How many reps did you complete for {lift.display_name} AMRAP set ({target}+)? "
        )
        try:
            reps = int(raw)
        except ValueError:
            views.print_error(f"Invalid number: {raw!r}")
            continue
        if reps < floor:
            views.print_error(f"Enter a whole number ≥ {floor}")
            continue
        return reps


def _collect_amrap_reps(
    workout: Workout,
    given: dict[LiftName, int],
    allow_failure: bool,
) -> dict[LiftName, int]:
    """Use reps from --reps where given; prompt for each remaining AMRAP set."""
    performed = {lift.lift_name for lift in workout.exercises}
    for lift_name in given:
        if lift_name not in performed:
            views.print_warning(
                f"Ignoring reps for {lift_name.display_name}: not in the Day {workout.day} workout"
            )

    reps: dict[LiftName, int] = {}
    for lift in workout.exercises:
        amrap = lift.amrap_set()
        if amrap is None:
            continue
        if lift.lift_name in given:
            reps[lift.lift_name] = given[lift.lift_name]
        else:
            reps[lift.lift_name] = _prompt_amrap_reps(lift.lift_name, amrap.target_reps, allow_failure)
    return reps


@workout_app.command("next")
def next_workout(config_dir: ConfigDirOption = None) -> None:
    """Show the next workout for the current user's program."""
    store = get_store(config_dir)
    try:
        user, _, program = load_active(store)
        workout = calculate_next_workout(user, program)
    except DOMAIN_ERRORS as e:
        exit_with_error(e)

    views.print_workout(workout)


@workout_app.command("log")
def log_workout(
    reps: Annotated[
        Optional[list[str]],
        typer.Option("--reps", "-r", help="AMRAP reps as LIFT=N, e.g. squat=8 (repeatable)"),
    ] = None,
    allow_failure: Annotated[
        bool,
        typer.Option("--allow-failure", help="Accept 0 AMRAP reps as a failed set"),
    ] = False,
    config_dir: ConfigDirOption = None,
) -> None:
    """
    Log the next workout and progress the working weights.

    Warmup and working sets are recorded as prescribed; AMRAP reps are taken
    from --reps or prompted for. Weights then move by the program's
    progression rules and the cycle advances one day.
    """
    store = get_store(config_dir)
    try:
        user, user_program, program = load_active(store)
        workout = calculate_next_workout(user, program)
    except DOMAIN_ERRORS as e:
        exit_with_error(e)

    try:
        given = parse_lift_values(reps, cast=int)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_workout(workout)
    amrap_reps = _collect_amrap_reps(workout, given, allow_failure)

    try:
        completed = build_completed_workout(workout, amrap_reps, allow_failure=allow_failure)
        new_weights = calculate_progression(
            completed, user_program.current_weights, program.progression_rules
        )
    except DOMAIN_ERRORS as e:
        exit_with_error(e)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    old_weights = dict(user_program.current_weights)
    user.workout_history.append(completed)
    user_program.current_weights = new_weights
    user_program.current_day = advance_day(workout.day, program.cycle_length)

    try:
        store.update(user)
    except DOMAIN_ERRORS as e:
        exit_with_error(e)

    views.print_weight_changes(old_weights, new_weights)
    views.print_workout_summary(completed, user_program.current_day)


@workout_app.command("history")
def history(
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", help="Show only the most recent N workouts"),
    ] = None,
    config_dir: ConfigDirOption = None,
) -> None:
    """Show logged workouts for the current user."""
    store = get_store(config_dir)
    try:
        user = store.load_current_user()
    except DOMAIN_ERRORS as e:
        exit_with_error(e)

    workouts = sorted(user.workout_history, key=lambda w: w.entered_at)
    if limit is not None and limit > 0:
        workouts = workouts[-limit:]
    views.print_history(workouts)
