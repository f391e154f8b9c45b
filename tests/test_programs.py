"""
Tests for YAML program loading, user overrides and the registry.
"""

import tempfile
from pathlib import Path

import pytest

from greyskull.core.errors import ProgramNotFoundError
from greyskull.core.models import LiftName, SetType
from greyskull.core.programs import get_program, list_programs, load_programs, program_from_dict

GREYSKULL_LP_ID = "550e8400-e29b-41d4-a716-446655440000"

MINIMAL_PROGRAM_YAML = """\
id: press-only
name: Press Only
version: "0.1"
workouts:
  - day: 1
    lifts:
      - lift_name: overhead press
        working_sets:
          - {reps: 5, weight_percentage: 1.0, type: AMRAPSet}
progression_rules:
  increase_rules: {OverheadPress: 2.5}
  deload_percentage: 0.9
  double_threshold: 10
"""


@pytest.fixture
def user_dir():
    """Temporary user programs directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _minimal_dict(**overrides) -> dict:
    d = {
        "id": "p1",
        "name": "P1",
        "version": "1",
        "workouts": [
            {"day": 1, "lifts": [{"lift_name": "Squat", "working_sets": [
                {"reps": 5, "weight_percentage": 1.0, "type": "AMRAPSet"},
            ]}]},
        ],
        "progression_rules": {
            "increase_rules": {"Squat": 5.0},
            "deload_percentage": 0.9,
            "double_threshold": 10,
        },
    }
    d.update(overrides)
    return d


# ===========================================================================
# Bundled Greyskull LP
# ===========================================================================

class TestBundledGreyskullLP:

    def test_loaded_by_fixed_id(self):
        """The bundled program resolves by its fixed id."""
        program = get_program(GREYSKULL_LP_ID)
        assert program.name == "OG Greyskull LP"
        assert program.version == "1.0.0"

    def test_six_day_rotation(self):
        """Presses alternate daily; squats on four days, deadlifts on two."""
        program = get_program(GREYSKULL_LP_ID)
        days = [[lt.lift_name for lt in w.lifts] for w in program.workouts]

        assert program.cycle_length == 6
        assert days == [
            [LiftName.OVERHEAD_PRESS, LiftName.SQUAT],
            [LiftName.BENCH_PRESS, LiftName.DEADLIFT],
            [LiftName.OVERHEAD_PRESS, LiftName.SQUAT],
            [LiftName.BENCH_PRESS, LiftName.SQUAT],
            [LiftName.OVERHEAD_PRESS, LiftName.DEADLIFT],
            [LiftName.BENCH_PRESS, LiftName.SQUAT],
        ]

    def test_set_templates(self):
        """Four-set warmup ramp and a 2x5, 1x5+ working block."""
        lift = get_program(GREYSKULL_LP_ID).workout_for_day(1).lifts[0]

        assert [(t.reps, t.weight_percentage) for t in lift.warmup_sets] == [
            (5, 0.0), (4, 0.55), (3, 0.70), (2, 0.85),
        ]
        assert [(t.reps, t.set_type) for t in lift.working_sets] == [
            (5, SetType.WORKING), (5, SetType.WORKING), (5, SetType.AMRAP),
        ]

    def test_progression_rules(self):
        """Upper body +2.5, lower body +5, deload 90%, double at 10."""
        rules = get_program(GREYSKULL_LP_ID).progression_rules

        assert rules.increase_rules == {
            LiftName.OVERHEAD_PRESS: 2.5,
            LiftName.BENCH_PRESS: 2.5,
            LiftName.SQUAT: 5.0,
            LiftName.DEADLIFT: 5.0,
        }
        assert rules.deload_percentage == 0.9
        assert rules.double_threshold == 10

    def test_lift_names(self):
        """Lifts are listed in first-appearance order."""
        assert get_program(GREYSKULL_LP_ID).lift_names() == [
            LiftName.OVERHEAD_PRESS,
            LiftName.SQUAT,
            LiftName.BENCH_PRESS,
            LiftName.DEADLIFT,
        ]

    def test_unknown_program(self):
        """An unknown id raises ProgramNotFoundError."""
        with pytest.raises(ProgramNotFoundError):
            get_program("nope")


# ===========================================================================
# program_from_dict
# ===========================================================================

class TestProgramFromDict:

    def test_minimal(self):
        """A one-day program loads with its rules."""
        program = program_from_dict(_minimal_dict())
        assert program.cycle_length == 1
        assert program.progression_rules.increment_for(LiftName.SQUAT) == 5.0
        assert program.progression_rules.increment_for(LiftName.DEADLIFT) is None

    def test_missing_field(self):
        """Missing top-level fields are named in the error."""
        d = _minimal_dict()
        del d["progression_rules"]
        with pytest.raises(ValueError, match="progression_rules"):
            program_from_dict(d)

    def test_unknown_lift(self):
        """Lift names outside the four barbell lifts are rejected."""
        d = _minimal_dict()
        d["workouts"][0]["lifts"][0]["lift_name"] = "Curl"
        with pytest.raises(ValueError, match="Unknown lift"):
            program_from_dict(d)

    def test_unknown_set_type(self):
        """Set types other than warmup, working and AMRAP are rejected."""
        d = _minimal_dict()
        d["workouts"][0]["lifts"][0]["working_sets"][0]["type"] = "DropSet"
        with pytest.raises(ValueError, match="Unknown set type"):
            program_from_dict(d)

    def test_day_gap_rejected(self):
        """Workout days must start at 1 without gaps."""
        d = _minimal_dict()
        d["workouts"][0]["day"] = 2
        with pytest.raises(ValueError, match="without gaps"):
            program_from_dict(d)

    def test_days_sorted(self):
        """Days listed out of order are sorted."""
        d = _minimal_dict()
        d["workouts"] = [
            {"day": 2, "lifts": [{"lift_name": "Deadlift"}]},
            {"day": 1, "lifts": [{"lift_name": "Squat"}]},
        ]
        program = program_from_dict(d)
        assert program.workout_for_day(1).lifts[0].lift_name is LiftName.SQUAT

    def test_bad_deload_percentage(self):
        """A deload percentage outside (0, 1) is rejected."""
        d = _minimal_dict()
        d["progression_rules"]["deload_percentage"] = 1.5
        with pytest.raises(ValueError):
            program_from_dict(d)


# ===========================================================================
# User program directory
# ===========================================================================

class TestUserPrograms:

    def test_override_merges_over_bundled(self, user_dir):
        """A same-named user file only changes the keys it lists."""
        (user_dir / "greyskull_lp.yaml").write_text(
            "progression_rules:\n  double_threshold: 8\n", encoding="utf-8"
        )
        program = get_program(GREYSKULL_LP_ID, user_dir)

        assert program.progression_rules.double_threshold == 8
        assert program.progression_rules.deload_percentage == 0.9
        assert program.cycle_length == 6

    def test_user_only_program_added(self, user_dir):
        """A user file with no bundled counterpart is a new program."""
        (user_dir / "press_only.yaml").write_text(MINIMAL_PROGRAM_YAML, encoding="utf-8")
        programs = load_programs(user_dir)

        assert set(programs) == {GREYSKULL_LP_ID, "press-only"}
        assert programs["press-only"].lift_names() == [LiftName.OVERHEAD_PRESS]

    def test_listed_by_name(self, user_dir):
        """Programs are listed sorted by name."""
        (user_dir / "press_only.yaml").write_text(MINIMAL_PROGRAM_YAML, encoding="utf-8")
        assert [p.name for p in list_programs(user_dir)] == ["OG Greyskull LP", "Press Only"]

    def test_invalid_user_program_skipped(self, user_dir):
        """An invalid user file warns and is skipped."""
        (user_dir / "broken.yaml").write_text("id: broken\nname: Broken\n", encoding="utf-8")
        with pytest.warns(UserWarning, match="broken"):
            programs = load_programs(user_dir)
        assert set(programs) == {GREYSKULL_LP_ID}

    def test_missing_user_dir_ignored(self, user_dir):
        """A user directory that does not exist is ignored."""
        programs = load_programs(user_dir / "does-not-exist")
        assert set(programs) == {GREYSKULL_LP_ID}
