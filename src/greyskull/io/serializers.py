"""
JSON serialization for user and workout records.

Handles conversion between dataclasses and JSON-compatible dicts.
Field names match the on-disk format of earlier greyskull releases
(``lift_name``, ``type``, ``current_weights`` keyed by lift value).
"""

import json
import math
from datetime import datetime
from typing import Any

from ..core import models
from ..core.models import Lift, LiftName, Set, SetType, User, UserProgram, Workout


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_username(username: str) -> str:
    """
    Validate a username and return it stripped.

    Raises:
        ValidationError: If the username is empty or not filesystem-safe
    """
    try:
        return models.validate_username(username)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def validate_finite(value: float, name: str) -> float:
    """
    Validate that a value is a finite number (not NaN or infinity).

    Raises:
        ValidationError: If value is NaN or infinite
    """
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be a finite number, got {value}")
    return value


def _parse_lift(value: str) -> LiftName:
    try:
        return LiftName.parse(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def _parse_set_type(value: str) -> SetType:
    try:
        return SetType(value)
    except ValueError as e:
        raise ValidationError(f"Invalid set type: {value!r}") from e


def _parse_timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid timestamp: {value!r}") from e


def weights_to_dict(weights: dict[LiftName, float]) -> dict[str, float]:
    return {lift.value: weight for lift, weight in weights.items()}


def dict_to_weights(data: dict[str, Any] | None) -> dict[LiftName, float]:
    weights: dict[LiftName, float] = {}
    for key, value in (data or {}).items():
        weight = float(value)
        validate_finite(weight, f"weight for {key}")
        validate_non_negative(weight, f"weight for {key}")
        weights[_parse_lift(key)] = weight
    return weights


def set_to_dict(s: Set) -> dict[str, Any]:
    return {
        "id": s.id,
        "weight": s.weight,
        "target_reps": s.target_reps,
        "actual_reps": s.actual_reps,
        "type": s.set_type.value,
        "order": s.order,
    }


def dict_to_set(data: dict[str, Any]) -> Set:
    """
    Convert dict to Set.

    Raises:
        ValidationError: If data is invalid
    """
    target_reps = int(data.get("target_reps", 0))
    actual_reps = int(data.get("actual_reps", 0))
    weight = float(data.get("weight", 0.0))
    validate_non_negative(target_reps, "target_reps")
    validate_non_negative(actual_reps, "actual_reps")
    validate_finite(weight, "weight")
    validate_non_negative(weight, "weight")
    validate_positive(int(data.get("order", 0)), "order")

    kwargs: dict[str, Any] = {}
    if data.get("id"):
        kwargs["id"] = str(data["id"])

    return Set(
        weight=weight,
        target_reps=target_reps,
        actual_reps=actual_reps,
        set_type=_parse_set_type(data.get("type", "")),
        order=int(data["order"]),
        **kwargs,
    )


def lift_to_dict(lift: Lift) -> dict[str, Any]:
    return {
        "id": lift.id,
        "lift_name": lift.lift_name.value,
        "sets": [set_to_dict(s) for s in lift.sets],
    }


def dict_to_lift(data: dict[str, Any]) -> Lift:
    kwargs: dict[str, Any] = {}
    if data.get("id"):
        kwargs["id"] = str(data["id"])
    return Lift(
        lift_name=_parse_lift(data.get("lift_name", "")),
        sets=[dict_to_set(s) for s in data.get("sets") or []],
        **kwargs,
    )


def workout_to_dict(workout: Workout) -> dict[str, Any]:
    return {
        "id": workout.id,
        "user_program_id": workout.user_program_id,
        "day": workout.day,
        "exercises": [lift_to_dict(lift) for lift in workout.exercises],
        "entered_at": workout.entered_at.isoformat(),
    }


def dict_to_workout(data: dict[str, Any]) -> Workout:
    """
    Convert dict to Workout.

    Raises:
        ValidationError: If data is invalid
    """
    day = int(data.get("day", 0))
    validate_positive(day, "day")

    kwargs: dict[str, Any] = {}
    if data.get("id"):
        kwargs["id"] = str(data["id"])
    if data.get("entered_at"):
        kwargs["entered_at"] = _parse_timestamp(data["entered_at"])

    return Workout(
        user_program_id=str(data.get("user_program_id", "")),
        day=day,
        exercises=[dict_to_lift(e) for e in data.get("exercises") or []],
        **kwargs,
    )


def user_program_to_dict(up: UserProgram) -> dict[str, Any]:
    return {
        "id": up.id,
        "user_id": up.user_id,
        "program_id": up.program_id,
        "starting_weights": weights_to_dict(up.starting_weights),
        "current_weights": weights_to_dict(up.current_weights),
        "current_day": up.current_day,
        "started_at": up.started_at.isoformat(),
    }


def dict_to_user_program(data: dict[str, Any]) -> UserProgram:
    """
    Convert dict to UserProgram.

    Raises:
        ValidationError: If data is invalid
    """
    current_day = int(data.get("current_day", 1))
    validate_positive(current_day, "current_day")

    kwargs: dict[str, Any] = {}
    if data.get("id"):
        kwargs["id"] = str(data["id"])
    if data.get("started_at"):
        kwargs["started_at"] = _parse_timestamp(data["started_at"])

    return UserProgram(
        user_id=str(data.get("user_id", "")),
        program_id=str(data.get("program_id", "")),
        starting_weights=dict_to_weights(data.get("starting_weights")),
        current_weights=dict_to_weights(data.get("current_weights")),
        current_day=current_day,
        **kwargs,
    )


_NIL_UUID = "00000000-0000-0000-0000-000000000000"


def _parse_program_ref(value: Any) -> str | None:
    """Normalise the current-program pointer; empty and nil UUIDs mean none."""
    if not value or str(value) == _NIL_UUID:
        return None
    return str(value)


def user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "current_program": user.current_program,
        "programs": {pid: user_program_to_dict(up) for pid, up in user.programs.items()},
        "workout_history": [workout_to_dict(w) for w in user.workout_history],
        "created_at": user.created_at.isoformat(),
    }


def dict_to_user(data: dict[str, Any]) -> User:
    """
    Convert dict to User.

    Raises:
        ValidationError: If data is invalid
    """
    username = validate_username(data.get("username", ""))

    kwargs: dict[str, Any] = {}
    if data.get("id"):
        kwargs["id"] = str(data["id"])
    if data.get("created_at"):
        kwargs["created_at"] = _parse_timestamp(data["created_at"])

    programs = {
        str(pid): dict_to_user_program(up)
        for pid, up in (data.get("programs") or {}).items()
    }

    return User(
        username=username,
        current_program=_parse_program_ref(data.get("current_program")),
        programs=programs,
        workout_history=[dict_to_workout(w) for w in data.get("workout_history") or []],
        **kwargs,
    )


def user_to_json(user: User) -> str:
    """Serialize a user to an indented JSON document."""
    return json.dumps(user_to_dict(user), indent=2)


def user_from_json(text: str) -> User:
    """
    Parse a user JSON document.

    Raises:
        ValidationError: If the document is not valid JSON or not a valid user
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("User record must be a JSON object")
    try:
        return dict_to_user(data)
    except ValidationError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(str(e)) from e
