"""
Workout assembly for the current day of a program cycle.

Builds the prescribed workout from a user's cycle state and a program
template, and turns a prescribed workout plus recorded AMRAP reps into a
completed workout for the history.
"""

import logging
from collections.abc import Mapping

from .errors import MissingAMRAPRepsError, MissingWeightError
from .models import Lift, LiftName, Program, Set, SetType, User, Workout
from .sets import generate_warmup_sets, generate_working_sets

logger = logging.getLogger(__name__)


def get_workout_day(current_day: int, total_days: int) -> int:
    """
    Map an ever-increasing day counter onto the 1-based program cycle.

    get_workout_day(7, 6) == 1, get_workout_day(6, 6) == 6.
    """
    if total_days <= 0:
        raise ValueError("total_days must be positive")
    return (current_day - 1) % total_days + 1


def advance_day(current_day: int, total_days: int) -> int:
    """Return the day after current_day, wrapping to 1 after the last day."""
    next_day = current_day + 1
    if next_day > total_days:
        return 1
    return next_day


def build_lift(lift_name: LiftName, working_weight: float, warmup_templates, working_templates) -> Lift:
    """Generate warmup then working sets, numbering working sets after the warmups."""
    warmups = generate_warmup_sets(working_weight, warmup_templates)
    working = generate_working_sets(working_weight, working_templates)
    for s in working:
        s.order += len(warmups)
    return Lift(lift_name=lift_name, sets=warmups + working)


def calculate_next_workout(user: User, program: Program) -> Workout:
    """
    Prescribe the next workout for the user's active program run.

    Args:
        user: User whose current program drives the workout
        program: Template for the user's active program

    Returns:
        Workout for the current day of the cycle, lifts in template order

    Raises:
        NoActiveProgramError: The user has no current program
        CycleNotFoundError: The current program reference is dangling
        MissingWeightError: A lift of the day has no tracked weight
    """
    user_program = user.active_program()

    day = get_workout_day(user_program.current_day, program.cycle_length)
    template = program.workout_for_day(day)

    workout = Workout(user_program_id=user_program.id, day=day)
    for lift_tpl in template.lifts:
        weight = user_program.current_weights.get(lift_tpl.lift_name)
        if weight is None:
            raise MissingWeightError(lift_tpl.lift_name)
        workout.exercises.append(
            build_lift(lift_tpl.lift_name, weight, lift_tpl.warmup_sets, lift_tpl.working_sets)
        )

    logger.debug(
        "Prescribed day %d of %s for %s (%d lifts)",
        day, program.name, user.username, len(workout.exercises),
    )
    return workout


def build_completed_workout(
    prescribed: Workout,
    amrap_reps: Mapping[LiftName, int],
    allow_failure: bool = False,
) -> Workout:
    """
    Record a performed workout from its prescription.

    Non-AMRAP sets are assumed done as prescribed; AMRAP sets take the rep
    counts the lifter reported. The prescription itself is left untouched.

    Args:
        prescribed: Workout returned by calculate_next_workout
        amrap_reps: Reps achieved on each lift's AMRAP set
        allow_failure: Accept 0 reps as a recorded failure

    Raises:
        MissingAMRAPRepsError: An AMRAP set has no reported reps
        ValueError: Negative reps, or 0 reps without allow_failure
    """
    completed = Workout(user_program_id=prescribed.user_program_id, day=prescribed.day)

    for lift in prescribed.exercises:
        sets: list[Set] = []
        for s in lift.sets:
            if s.set_type is SetType.AMRAP:
                if lift.lift_name not in amrap_reps:
                    raise MissingAMRAPRepsError(lift.lift_name)
                reps = amrap_reps[lift.lift_name]
                if reps < 0 or (reps == 0 and not allow_failure):
                    raise ValueError(
                        f"AMRAP reps for {lift.lift_name.display_name} must be positive, got {reps}"
                    )
            else:
                reps = s.target_reps
            sets.append(
                Set(
                    weight=s.weight,
                    target_reps=s.target_reps,
                    set_type=s.set_type,
                    order=s.order,
                    actual_reps=reps,
                )
            )
        completed.exercises.append(Lift(lift_name=lift.lift_name, sets=sets))

    return completed
