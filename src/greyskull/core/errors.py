"""
Domain errors raised by the calculation core.

Two families:
- missing-reference: something the calculation needs is absent from the
  caller-supplied data (a cycle, a weight, a rule, a program).
- malformed-precondition: the data is present but unusable (a completed
  workout without an AMRAP set).

None of these are transient; callers report them and stop.
"""


class GreyskullError(Exception):
    """Base class for all greyskull domain errors."""


class MissingReferenceError(GreyskullError, LookupError):
    """A lift, cycle, weight or program the computation needs is absent."""


class PreconditionError(GreyskullError, ValueError):
    """Input data is present but does not satisfy a precondition."""


class NoActiveProgramError(MissingReferenceError):
    """The user has not started a program."""

    def __init__(self) -> None:
        super().__init__("no active program")


class CycleNotFoundError(MissingReferenceError):
    """The user's current program id does not resolve to a known cycle."""

    def __init__(self, cycle_id: str) -> None:
        self.cycle_id = cycle_id
        super().__init__(f"cycle not found: {cycle_id}")


class ProgramNotFoundError(MissingReferenceError):
    """No program template is registered under the given id."""

    def __init__(self, program_id: str) -> None:
        self.program_id = program_id
        super().__init__(f"program not found: {program_id}")


class MissingWeightError(MissingReferenceError):
    """A lift has no tracked current weight."""

    def __init__(self, lift_name, message: str | None = None) -> None:
        self.lift_name = lift_name
        super().__init__(message or f"missing weight for lift {lift_name}")


class MissingProgressionRuleError(MissingReferenceError):
    """A lift has no base increment in the program's progression rules."""

    def __init__(self, lift_name) -> None:
        self.lift_name = lift_name
        super().__init__(f"no progression rule for lift {lift_name}")


class MissingAMRAPSetError(PreconditionError):
    """A performed lift has no AMRAP set to drive progression."""

    def __init__(self, lift_name) -> None:
        self.lift_name = lift_name
        super().__init__(f"no AMRAP set found for lift {lift_name}")


class MissingAMRAPRepsError(PreconditionError):
    """No AMRAP rep count was supplied for a lift in the workout."""

    def __init__(self, lift_name) -> None:
        self.lift_name = lift_name
        super().__init__(f"no AMRAP reps recorded for lift {lift_name}")
