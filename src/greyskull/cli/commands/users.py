"""User commands: create, list, switch."""

from typing import Annotated, Optional

import typer

from ...core.models import User
from ...io.serializers import ValidationError, validate_username
from ...io.user_store import NoCurrentUserError
from .. import views
from ..app import (
    DOMAIN_ERRORS,
    ConfigDirOption,
    exit_with_error,
    get_store,
    prompt_input,
    user_app,
)


@user_app.command("create")
def create_user(
    username: Annotated[
        Optional[str],
        typer.Argument(help="Username: starts with a letter; letters, digits, dashes"),
    ] = None,
    config_dir: ConfigDirOption = None,
) -> None:
    """
    Create a new user and make it the current user.

    Usernames are stored case-insensitively: "Alice" and "alice" are the
    same user.
    """
    store = get_store(config_dir)

    if username is None:
        while True:
            raw = prompt_input("Enter username: ")
            try:
                username = validate_username(raw)
                break
            except ValidationError as e:
                views.print_error(str(e))

    try:
        user = User(username=validate_username(username))
        store.create(user)
        store.set_current(user.username)
    except DOMAIN_ERRORS as e:
        exit_with_error(e)

    views.print_success(f'User "{user.username}" created and set as current user.')


@user_app.command("list")
def list_users(config_dir: ConfigDirOption = None) -> None:
    """List all users. The current user is marked with an asterisk (*)."""
    store = get_store(config_dir)

    usernames = store.list_usernames()
    if not usernames:
        views.print_info("No users found. Use 'greyskull user create' to create your first user.")
        return

    try:
        current: str | None = store.get_current()
    except NoCurrentUserError:
        current = None
    else:
        # get_current returns the stored casing; match it against the listed names
        current = next((n for n in usernames if n.lower() == current.lower()), current)

    views.print_users(usernames, current)


@user_app.command("switch")
def switch_user(
    username: Annotated[str, typer.Argument(help="User to switch to (case-insensitive)")],
    config_dir: ConfigDirOption = None,
) -> None:
    """Make another existing user the current user."""
    store = get_store(config_dir)
    try:
        user = store.set_current(username)
    except DOMAIN_ERRORS as e:
        exit_with_error(e)

    views.print_success(f'Switched to user "{user.username}".')
