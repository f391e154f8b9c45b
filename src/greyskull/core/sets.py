"""
Set generation: turn a working weight and set templates into concrete sets.

Every generated weight is rounded down to the nearest ROUNDING_INCREMENT so
it can be loaded on a standard bar.
"""

import math
from collections.abc import Sequence

from .config import BAR_WEIGHT, ROUNDING_INCREMENT, WARMUP_WEIGHT_FLOOR
from .models import Set, SetTemplate, SetType

# Absorbs float error when a percentage product should land on a multiple
_FLOAT_TOLERANCE = 1e-9


def round_down(weight: float, increment: float = ROUNDING_INCREMENT) -> float:
    """
    Round a weight down to the nearest multiple of the increment.

    Never rounds up: round_down(53.625) == 52.5, round_down(55.0) == 55.0.
    A product that lands a hair under a multiple (0.7 * x giving 69.99999...)
    is treated as the multiple.
    """
    return math.floor(weight / increment + _FLOAT_TOLERANCE) * increment


def generate_warmup_sets(
    working_weight: float,
    templates: Sequence[SetTemplate],
) -> list[Set]:
    """
    Compute the warmup ramp for a lift.

    Light working weights need no ramp-up: at or below WARMUP_WEIGHT_FLOOR
    the whole block is skipped, whatever the templates say. Otherwise a 0%
    template is the empty bar and every other template is a rounded-down
    fraction of the working weight.

    Args:
        working_weight: Current prescribed load for the lift
        templates: Warmup set templates, in order

    Returns:
        Warmup sets numbered from 1
    """
    if working_weight <= WARMUP_WEIGHT_FLOOR:
        return []

    sets: list[Set] = []
    for order, tpl in enumerate(templates, 1):
        if tpl.weight_percentage == 0.0:
            raw = BAR_WEIGHT
        else:
            raw = working_weight * tpl.weight_percentage
        sets.append(
            Set(
                weight=round_down(raw),
                target_reps=tpl.reps,
                set_type=SetType.WARMUP,
                order=order,
            )
        )
    return sets


def generate_working_sets(
    working_weight: float,
    templates: Sequence[SetTemplate],
) -> list[Set]:
    """
    Compute the working (and AMRAP) sets for a lift.

    All working sets share one weight: the working weight rounded down once.
    No bar-weight floor applies here; small weights are kept as-is.
    """
    weight = round_down(working_weight)
    return [
        Set(
            weight=weight,
            target_reps=tpl.reps,
            set_type=tpl.set_type,
            order=order,
        )
        for order, tpl in enumerate(templates, 1)
    ]
