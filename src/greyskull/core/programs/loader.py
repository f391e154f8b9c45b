"""
YAML → Program loader.

Loads program templates from individual YAML files in the bundled
``src/greyskull/programs/`` directory.  Each file (e.g. greyskull_lp.yaml)
holds one program: id, name, version, the day-by-day workouts and the
progression rules.

User overrides: place matching files in ``<config dir>/programs/``.
A user file is deep-merged over the bundled file with the same stem, so only
changed keys need to be listed (e.g. a different ``double_threshold``).  A
user file with no bundled counterpart is loaded as a new program.

Usage (internal, called by registry.py):
    from .loader import load_programs_from_yaml
    programs = load_programs_from_yaml(user_dir)
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path

import yaml

from ..models import (
    LiftName,
    LiftTemplate,
    Program,
    ProgressionRules,
    SetTemplate,
    SetType,
    WorkoutTemplate,
)

logger = logging.getLogger(__name__)

_REQUIRED_PROGRAM_FIELDS: frozenset[str] = frozenset(
    {"id", "name", "version", "workouts", "progression_rules"}
)

_REQUIRED_RULE_FIELDS: frozenset[str] = frozenset(
    {"increase_rules", "deload_percentage", "double_threshold"}
)


def _set_template_from_dict(d: dict) -> SetTemplate:
    missing = {"reps", "weight_percentage", "type"} - set(d)
    if missing:
        raise ValueError(f"SetTemplate missing fields: {sorted(missing)}")
    try:
        set_type = SetType(d["type"])
    except ValueError:
        valid = ", ".join(t.value for t in SetType)
        raise ValueError(f"Unknown set type {d['type']!r}. Valid types: {valid}") from None
    return SetTemplate(
        reps=int(d["reps"]),
        weight_percentage=float(d["weight_percentage"]),
        set_type=set_type,
    )


def _lift_template_from_dict(d: dict) -> LiftTemplate:
    if "lift_name" not in d:
        raise ValueError("LiftTemplate missing field: lift_name")
    return LiftTemplate(
        lift_name=LiftName.parse(d["lift_name"]),
        warmup_sets=tuple(_set_template_from_dict(s) for s in d.get("warmup_sets") or ()),
        working_sets=tuple(_set_template_from_dict(s) for s in d.get("working_sets") or ()),
    )


def _rules_from_dict(d: dict) -> ProgressionRules:
    missing = _REQUIRED_RULE_FIELDS - set(d)
    if missing:
        raise ValueError(f"ProgressionRules missing fields: {sorted(missing)}")
    return ProgressionRules(
        increase_rules={LiftName.parse(k): float(v) for k, v in d["increase_rules"].items()},
        deload_percentage=float(d["deload_percentage"]),
        double_threshold=int(d["double_threshold"]),
    )


def program_from_dict(d: dict) -> Program:
    """Convert a raw dict (from YAML) to a Program.

    Raises ValueError if any required field is absent or a lift / set type
    name is not recognised.
    """
    missing = _REQUIRED_PROGRAM_FIELDS - set(d)
    if missing:
        raise ValueError(f"Program missing fields: {sorted(missing)}")

    workouts = []
    for raw in d["workouts"]:
        if "day" not in raw:
            raise ValueError("WorkoutTemplate missing field: day")
        workouts.append(
            WorkoutTemplate(
                day=int(raw["day"]),
                lifts=tuple(_lift_template_from_dict(lt) for lt in raw.get("lifts") or ()),
            )
        )
    workouts.sort(key=lambda w: w.day)

    days = [w.day for w in workouts]
    if days != list(range(1, len(days) + 1)):
        raise ValueError(f"Workout days must run 1..N without gaps, got {days}")

    return Program(
        id=str(d["id"]),
        name=str(d["name"]),
        version=str(d["version"]),
        workouts=tuple(workouts),
        progression_rules=_rules_from_dict(d["progression_rules"]),
    )


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; return {} (with a warning) if it cannot be parsed."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"greyskull: cannot read program file {path}: {exc}", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def get_bundled_programs_dir() -> Path | None:
    """Return path to the bundled programs/ data directory, or None if not found."""
    # loader.py lives at src/greyskull/core/programs/loader.py
    # three levels up → src/greyskull/
    candidate = Path(__file__).parent.parent.parent / "programs"
    return candidate if candidate.is_dir() else None


def load_programs_from_yaml(user_dir: Path | None = None) -> dict[str, Program]:
    """Return {program_id: Program} loaded from per-program YAML files.

    Loads each ``<stem>.yaml`` from the bundled programs/ directory, merging a
    same-named file from *user_dir* over it when present.  User-only files are
    loaded as new programs.  Invalid files are skipped with a warning.
    """
    bundled_dir = get_bundled_programs_dir()
    if user_dir is not None and not user_dir.is_dir():
        user_dir = None

    stems: dict[str, Path] = {}
    if bundled_dir is not None:
        for p in sorted(bundled_dir.glob("*.yaml")):
            stems[p.stem] = p

    user_only: list[Path] = []
    if user_dir is not None:
        user_only = [p for p in sorted(user_dir.glob("*.yaml")) if p.stem not in stems]

    raw_programs: list[tuple[str, dict]] = []
    for stem, bundled_path in stems.items():
        raw = _load_yaml_file(bundled_path)
        if not raw:
            continue
        if user_dir is not None:
            user_path = user_dir / f"{stem}.yaml"
            if user_path.exists():
                user_raw = _load_yaml_file(user_path)
                if user_raw:
                    logger.debug("Merging user overrides from %s", user_path)
                    raw = _deep_merge(raw, user_raw)
        raw_programs.append((stem, raw))

    for p in user_only:
        raw = _load_yaml_file(p)
        if raw:
            raw_programs.append((p.stem, raw))

    result: dict[str, Program] = {}
    for stem, raw in raw_programs:
        try:
            program = program_from_dict(raw)
        except ValueError as exc:
            warnings.warn(f"greyskull: skipping program '{stem}': {exc}", stacklevel=2)
            continue
        result[program.id] = program

    return result
