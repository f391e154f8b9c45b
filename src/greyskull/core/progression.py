"""
Weight progression from AMRAP performance.

Decision policy, in priority order:
  reps < 5                   -> deload:  weight * deload_percentage
  reps >= double_threshold   -> double:  weight + 2 * increment
  otherwise                  -> normal:  weight + increment

Only the resulting weight is rounded; rep counts are compared as-is.
"""

import logging
from collections.abc import Mapping

from .config import DELOAD_REP_THRESHOLD
from .errors import MissingAMRAPSetError, MissingProgressionRuleError, MissingWeightError
from .models import Lift, LiftName, ProgressionRules, Workout
from .sets import round_down

logger = logging.getLogger(__name__)


def get_amrap_reps(lift: Lift) -> int:
    """
    Return the reps recorded on the lift's AMRAP set.

    Raises:
        MissingAMRAPSetError: The lift has no AMRAP set
    """
    amrap = lift.amrap_set()
    if amrap is None:
        raise MissingAMRAPSetError(lift.lift_name)
    return amrap.actual_reps


def calculate_new_weight(
    current_weight: float,
    amrap_reps: int,
    base_increment: float,
    rules: ProgressionRules,
) -> float:
    """
    Compute next cycle's working weight for one lift.

    Both boundaries belong to the higher tier: exactly 5 reps is a normal
    progression, exactly double_threshold reps doubles the increment.
    """
    if amrap_reps < DELOAD_REP_THRESHOLD:
        raw = current_weight * rules.deload_percentage
    elif amrap_reps >= rules.double_threshold:
        raw = current_weight + 2 * base_increment
    else:
        raw = current_weight + base_increment
    return round_down(raw)


def calculate_progression(
    completed: Workout,
    current_weights: Mapping[LiftName, float],
    rules: ProgressionRules,
) -> dict[LiftName, float]:
    """
    Compute updated working weights after a completed workout.

    Lifts not performed in the workout keep their weight. current_weights is
    not modified; a new dict is returned.

    Raises:
        MissingAMRAPSetError: A performed lift has no AMRAP set
        MissingProgressionRuleError: A performed lift has no increment rule
        MissingWeightError: A performed lift has no current weight
    """
    new_weights = dict(current_weights)

    for lift in completed.exercises:
        reps = get_amrap_reps(lift)

        increment = rules.increment_for(lift.lift_name)
        if increment is None:
            raise MissingProgressionRuleError(lift.lift_name)

        if lift.lift_name not in current_weights:
            raise MissingWeightError(
                lift.lift_name, f"current weight not found for lift {lift.lift_name}"
            )
        current = current_weights[lift.lift_name]

        new_weights[lift.lift_name] = calculate_new_weight(current, reps, increment, rules)
        logger.debug(
            "%s: %s reps on AMRAP, %.1f -> %.1f",
            lift.lift_name, reps, current, new_weights[lift.lift_name],
        )

    return new_weights
