"""
Tests for AMRAP-driven weight progression.

Rules used throughout: deload to 90%, double increment at 10+ reps.
"""

import pytest

from greyskull.core.errors import (
    MissingAMRAPSetError,
    MissingProgressionRuleError,
    MissingWeightError,
)
from greyskull.core.models import Lift, LiftName, ProgressionRules, Set, SetType, Workout
from greyskull.core.progression import calculate_new_weight, calculate_progression, get_amrap_reps

RULES = ProgressionRules(
    increase_rules={
        LiftName.OVERHEAD_PRESS: 2.5,
        LiftName.BENCH_PRESS: 2.5,
        LiftName.SQUAT: 5.0,
        LiftName.DEADLIFT: 5.0,
    },
    deload_percentage=0.9,
    double_threshold=10,
)


def _lift(lift_name: LiftName, weight: float, amrap_reps: int | None) -> Lift:
    """A performed lift: two working sets of 5 plus an AMRAP set (or none)."""
    sets = [
        Set(weight=weight, target_reps=5, set_type=SetType.WORKING, order=1, actual_reps=5),
        Set(weight=weight, target_reps=5, set_type=SetType.WORKING, order=2, actual_reps=5),
    ]
    if amrap_reps is not None:
        sets.append(
            Set(weight=weight, target_reps=5, set_type=SetType.AMRAP, order=3, actual_reps=amrap_reps)
        )
    return Lift(lift_name=lift_name, sets=sets)


def _workout(*lifts: Lift) -> Workout:
    return Workout(user_program_id="cycle-1", day=1, exercises=list(lifts))


# ===========================================================================
# calculate_new_weight
# ===========================================================================

class TestNewWeight:

    def test_deload(self):
        """Fewer than 5 reps drops to 90%, rounded down."""
        # 95 * 0.9 = 85.5 -> 85
        assert calculate_new_weight(95.0, 3, 2.5, RULES) == 85.0

    def test_normal_progression(self):
        """5 to 9 reps adds the base increment."""
        assert calculate_new_weight(95.0, 6, 2.5, RULES) == 97.5

    def test_double_progression(self):
        """10+ reps adds twice the increment."""
        assert calculate_new_weight(95.0, 12, 2.5, RULES) == 100.0

    def test_exactly_five_reps_is_normal(self):
        """Exactly 5 reps is a normal progression, not a deload."""
        assert calculate_new_weight(100.0, 5, 2.5, RULES) == 102.5

    def test_four_reps_deloads(self):
        """One rep short of 5 deloads."""
        assert calculate_new_weight(100.0, 4, 2.5, RULES) == 90.0

    def test_exactly_threshold_doubles(self):
        """Exactly the double threshold doubles the increment."""
        assert calculate_new_weight(100.0, 10, 5.0, RULES) == 110.0

    def test_just_below_threshold_is_normal(self):
        """One rep short of the threshold is a normal progression."""
        assert calculate_new_weight(100.0, 9, 5.0, RULES) == 105.0

    def test_zero_reps_deloads(self):
        """A failed AMRAP deloads."""
        assert calculate_new_weight(200.0, 0, 5.0, RULES) == 180.0

    def test_only_result_is_rounded(self):
        """The increment is added to the raw weight, then rounded once."""
        # 97.3 + 2.5 = 99.8 -> 97.5
        assert calculate_new_weight(97.3, 6, 2.5, RULES) == 97.5

    def test_custom_threshold(self):
        """The double threshold comes from the rules."""
        rules = ProgressionRules(
            increase_rules={LiftName.SQUAT: 5.0},
            deload_percentage=0.9,
            double_threshold=8,
        )
        assert calculate_new_weight(100.0, 8, 5.0, rules) == 110.0
        assert calculate_new_weight(100.0, 7, 5.0, rules) == 105.0


# ===========================================================================
# get_amrap_reps
# ===========================================================================

class TestAmrapReps:

    def test_reads_actual_reps(self):
        """Returns the reps recorded on the AMRAP set."""
        assert get_amrap_reps(_lift(LiftName.SQUAT, 135.0, 8)) == 8

    def test_missing_amrap_set(self):
        """A lift without an AMRAP set is reported by name."""
        with pytest.raises(MissingAMRAPSetError, match="no AMRAP set found for lift Squat"):
            get_amrap_reps(_lift(LiftName.SQUAT, 135.0, None))


# ===========================================================================
# calculate_progression
# ===========================================================================

class TestProgression:

    def test_updates_performed_lifts_only(self):
        """Only lifts in the workout move; the rest keep their weight."""
        current = {
            LiftName.OVERHEAD_PRESS: 95.0,
            LiftName.SQUAT: 135.0,
            LiftName.BENCH_PRESS: 115.0,
            LiftName.DEADLIFT: 185.0,
        }
        completed = _workout(
            _lift(LiftName.OVERHEAD_PRESS, 95.0, 6),
            _lift(LiftName.SQUAT, 135.0, 12),
        )

        result = calculate_progression(completed, current, RULES)

        assert result == {
            LiftName.OVERHEAD_PRESS: 97.5,
            LiftName.SQUAT: 145.0,
            LiftName.BENCH_PRESS: 115.0,
            LiftName.DEADLIFT: 185.0,
        }

    def test_input_not_mutated(self):
        """The caller's weights are left as they were."""
        current = {LiftName.SQUAT: 135.0}
        calculate_progression(_workout(_lift(LiftName.SQUAT, 135.0, 3)), current, RULES)
        assert current == {LiftName.SQUAT: 135.0}

    def test_empty_workout_copies_weights(self):
        """An empty workout returns an equal, separate mapping."""
        current = {LiftName.SQUAT: 135.0}
        result = calculate_progression(_workout(), current, RULES)
        assert result == current
        assert result is not current

    def test_missing_amrap_set(self):
        """A lift without an AMRAP set is reported by name."""
        completed = _workout(_lift(LiftName.SQUAT, 135.0, None))
        with pytest.raises(MissingAMRAPSetError):
            calculate_progression(completed, {LiftName.SQUAT: 135.0}, RULES)

    def test_missing_rule(self):
        """A performed lift with no increment rule is reported."""
        rules = ProgressionRules(
            increase_rules={LiftName.SQUAT: 5.0},
            deload_percentage=0.9,
            double_threshold=10,
        )
        completed = _workout(_lift(LiftName.DEADLIFT, 185.0, 5))
        with pytest.raises(MissingProgressionRuleError, match="no progression rule for lift Deadlift"):
            calculate_progression(completed, {LiftName.DEADLIFT: 185.0}, rules)

    def test_missing_current_weight(self):
        """A performed lift with no current weight is reported."""
        completed = _workout(_lift(LiftName.BENCH_PRESS, 115.0, 5))
        with pytest.raises(MissingWeightError, match="current weight not found for lift BenchPress"):
            calculate_progression(completed, {LiftName.SQUAT: 135.0}, RULES)

    def test_amrap_checked_before_rule(self):
        """The AMRAP set is checked before the progression rule."""
        rules = ProgressionRules(
            increase_rules={LiftName.SQUAT: 5.0},
            deload_percentage=0.9,
            double_threshold=10,
        )
        completed = _workout(_lift(LiftName.DEADLIFT, 185.0, None))
        with pytest.raises(MissingAMRAPSetError):
            calculate_progression(completed, {}, rules)
