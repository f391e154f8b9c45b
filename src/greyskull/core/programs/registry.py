"""
Program registry.

Programs are loaded from the bundled YAML files (plus any user files) each
time they are requested; nothing is cached at module level, so callers and
tests can point at a different user directory without resetting state.

The core calculators never consult the registry: they take a Program value.
"""

from pathlib import Path

from ..errors import ProgramNotFoundError
from ..models import Program
from .loader import load_programs_from_yaml


def load_programs(user_dir: Path | None = None) -> dict[str, Program]:
    """
    Return every available program keyed by id.

    Raises:
        RuntimeError: If no program definitions could be loaded at all
    """
    loaded = load_programs_from_yaml(user_dir)
    if not loaded:
        raise RuntimeError(
            "greyskull: no program definitions could be loaded from YAML. "
            "Check that src/greyskull/programs/*.yaml files are present and valid."
        )
    return loaded


def list_programs(user_dir: Path | None = None) -> list[Program]:
    """Return available programs sorted by name."""
    return sorted(load_programs(user_dir).values(), key=lambda p: p.name)


def get_program(program_id: str, user_dir: Path | None = None) -> Program:
    """
    Return the Program registered under program_id.

    Raises:
        ProgramNotFoundError: If no program has that id
    """
    programs = load_programs(user_dir)
    if program_id not in programs:
        raise ProgramNotFoundError(program_id)
    return programs[program_id]
