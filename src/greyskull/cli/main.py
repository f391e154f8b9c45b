"""
CLI entry point using Typer.

Provides commands for Greyskull LP tracking:
- user create / list / switch: Manage users
- program list / start: Pick a program and starting weights
- workout next / log / history: Show, record and review workouts
"""

from .app import app

# Command modules register themselves on the sub-apps at import time
from .commands import programs, users, workouts  # noqa: F401


def main() -> None:
    app()


if __name__ == "__main__":
    main()
