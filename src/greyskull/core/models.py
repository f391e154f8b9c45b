"""
Data models for greyskull.

Program templates (SetTemplate, LiftTemplate, WorkoutTemplate,
ProgressionRules, Program) are frozen: they are loaded once and passed into
the calculators as values. Generated and persisted records (Set, Lift,
Workout, UserProgram, User) are plain mutable dataclasses.
"""

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from .errors import CycleNotFoundError, NoActiveProgramError


class LiftName(str, Enum):
    """The four barbell lifts tracked by the program."""

    SQUAT = "Squat"
    DEADLIFT = "Deadlift"
    BENCH_PRESS = "BenchPress"
    OVERHEAD_PRESS = "OverheadPress"

    def __str__(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return _LIFT_DISPLAY[self]

    @classmethod
    def parse(cls, text: str) -> "LiftName":
        """
        Resolve a lift from user or file input.

        Accepts the stored value ("BenchPress"), the member name
        ("BENCH_PRESS") and spaced/dashed variants ("bench press",
        "bench-press"), case-insensitively.
        """
        key = re.sub(r"[\s_\-]", "", str(text)).lower()
        for lift in cls:
            if key in (lift.value.lower(), lift.name.replace("_", "").lower()):
                return lift
        valid = ", ".join(lift.value for lift in cls)
        raise ValueError(f"Unknown lift '{text}'. Valid lifts: {valid}")


_LIFT_DISPLAY: dict[LiftName, str] = {
    LiftName.SQUAT: "Squat",
    LiftName.DEADLIFT: "Deadlift",
    LiftName.BENCH_PRESS: "Bench Press",
    LiftName.OVERHEAD_PRESS: "Overhead Press",
}

# Order used when prompting for or listing weights across all lifts
LIFT_ORDER: tuple[LiftName, ...] = (
    LiftName.SQUAT,
    LiftName.DEADLIFT,
    LiftName.BENCH_PRESS,
    LiftName.OVERHEAD_PRESS,
)


class SetType(str, Enum):
    """Kind of a prescribed set."""

    WARMUP = "WarmupSet"
    WORKING = "WorkingSet"
    AMRAP = "AMRAPSet"

    def __str__(self) -> str:
        return self.value


def new_id() -> str:
    """Generate a fresh record identifier."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Program templates
# =============================================================================


@dataclass(frozen=True)
class SetTemplate:
    """
    One prescribed set in a program template.

    weight_percentage is a fraction of the working weight; 0.0 means the
    empty bar regardless of working weight.
    """

    reps: int
    weight_percentage: float
    set_type: SetType

    def __post_init__(self) -> None:
        if self.reps <= 0:
            raise ValueError("reps must be positive")
        if self.weight_percentage < 0:
            raise ValueError("weight_percentage must be non-negative")


@dataclass(frozen=True)
class LiftTemplate:
    """Warmup and working set templates for one lift on one day."""

    lift_name: LiftName
    warmup_sets: tuple[SetTemplate, ...] = ()
    working_sets: tuple[SetTemplate, ...] = ()


@dataclass(frozen=True)
class WorkoutTemplate:
    """The lifts prescribed for one day of the cycle."""

    day: int
    lifts: tuple[LiftTemplate, ...] = ()

    def __post_init__(self) -> None:
        if self.day <= 0:
            raise ValueError("day must be positive")


@dataclass(frozen=True)
class ProgressionRules:
    """
    How working weights move after each workout.

    increase_rules maps each lift to the amount added on normal progression.
    deload_percentage is applied to the current weight on a failed AMRAP.
    AMRAP reps at or above double_threshold add twice the increment.
    """

    increase_rules: dict[LiftName, float]
    deload_percentage: float
    double_threshold: int

    def __post_init__(self) -> None:
        if not 0 < self.deload_percentage < 1:
            raise ValueError("deload_percentage must be between 0 and 1")
        if self.double_threshold <= 0:
            raise ValueError("double_threshold must be positive")
        for lift, increment in self.increase_rules.items():
            if increment <= 0:
                raise ValueError(f"increase_rules[{lift}] must be positive, got {increment}")

    def increment_for(self, lift_name: LiftName) -> float | None:
        """Return the base increment for a lift, or None if the program has no rule."""
        return self.increase_rules.get(lift_name)


@dataclass(frozen=True)
class Program:
    """A complete program template: the day cycle plus progression rules."""

    id: str
    name: str
    version: str
    workouts: tuple[WorkoutTemplate, ...]
    progression_rules: ProgressionRules

    def __post_init__(self) -> None:
        if not self.workouts:
            raise ValueError(f"Program {self.name!r} has no workouts")

    @property
    def cycle_length(self) -> int:
        return len(self.workouts)

    def workout_for_day(self, day: int) -> WorkoutTemplate:
        """Return the template for a 1-based day within the cycle."""
        return self.workouts[day - 1]

    def lift_names(self) -> list[LiftName]:
        """Every lift referenced by the program, in first-appearance order."""
        seen: list[LiftName] = []
        for workout in self.workouts:
            for lift in workout.lifts:
                if lift.lift_name not in seen:
                    seen.append(lift.lift_name)
        return seen


# =============================================================================
# Generated / persisted records
# =============================================================================


@dataclass
class Set:
    """
    A concrete set with a computed weight.

    actual_reps is 0 until recorded. A set counts as complete once it has
    positive actual reps; a recorded 0 is a failed set.
    """

    weight: float
    target_reps: int
    set_type: SetType
    order: int
    actual_reps: int = 0
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if self.target_reps < 0:
            raise ValueError("target_reps must be non-negative")
        if self.actual_reps < 0:
            raise ValueError("actual_reps must be non-negative")
        if self.weight < 0:
            raise ValueError("weight must be non-negative")

    def is_complete(self) -> bool:
        return self.actual_reps > 0


@dataclass
class Lift:
    """All sets performed for one lift within a workout."""

    lift_name: LiftName
    sets: list[Set] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    def amrap_set(self) -> Set | None:
        """Return the lift's AMRAP set, or None when it has none."""
        for s in self.sets:
            if s.set_type is SetType.AMRAP:
                return s
        return None

    @property
    def warmup_sets(self) -> list[Set]:
        return [s for s in self.sets if s.set_type is SetType.WARMUP]

    @property
    def working_sets(self) -> list[Set]:
        """Working and AMRAP sets, in order."""
        return [s for s in self.sets if s.set_type is not SetType.WARMUP]


@dataclass
class Workout:
    """A prescribed or completed workout for one day of the cycle."""

    user_program_id: str
    day: int
    exercises: list[Lift] = field(default_factory=list)
    entered_at: datetime = field(default_factory=utc_now)
    id: str = field(default_factory=new_id)

    def lift(self, lift_name: LiftName) -> Lift | None:
        for lift in self.exercises:
            if lift.lift_name is lift_name:
                return lift
        return None


@dataclass
class UserProgram:
    """
    A user's run through a program: the mutable cycle state.

    current_day is 1-based and advances after every logged workout.
    """

    user_id: str
    program_id: str
    starting_weights: dict[LiftName, float] = field(default_factory=dict)
    current_weights: dict[LiftName, float] = field(default_factory=dict)
    current_day: int = 1
    started_at: datetime = field(default_factory=utc_now)
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if self.current_day <= 0:
            raise ValueError("current_day must be positive")
        for lift, weight in self.current_weights.items():
            if weight < 0:
                raise ValueError(f"current_weights[{lift}] must be non-negative")


_USERNAME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9-]*$")


def validate_username(username: str) -> str:
    """
    Return the username stripped of surrounding whitespace.

    Usernames double as file names, so they must start with a letter and
    contain only letters, digits and dashes.

    Raises:
        ValueError: If the username is empty or contains other characters
    """
    name = (username or "").strip()
    if not name:
        raise ValueError("username cannot be empty")
    if not _USERNAME_RE.match(name):
        raise ValueError(
            "username must start with a letter and contain only letters, "
            "numbers, and dashes"
        )
    return name


@dataclass
class User:
    """A lifter with their programs and logged workouts."""

    username: str
    current_program: str | None = None
    programs: dict[str, UserProgram] = field(default_factory=dict)
    workout_history: list[Workout] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        """Validate username."""
        self.username = validate_username(self.username)

    def active_program(self) -> UserProgram:
        """
        Return the user's current program run.

        Raises:
            NoActiveProgramError: No program has been started
            CycleNotFoundError: current_program does not match a stored run
        """
        if not self.current_program:
            raise NoActiveProgramError()
        user_program = self.programs.get(self.current_program)
        if user_program is None:
            raise CycleNotFoundError(self.current_program)
        return user_program

    def start_program(self, user_program: UserProgram) -> None:
        """Register a program run and make it current."""
        self.programs[user_program.id] = user_program
        self.current_program = user_program.id
