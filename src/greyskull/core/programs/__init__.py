"""Program templates: YAML loading and lookup."""

from .loader import program_from_dict
from .registry import get_program, list_programs, load_programs

__all__ = ["get_program", "list_programs", "load_programs", "program_from_dict"]
