"""Local login session for the CLI.

The session file only remembers who logged in on this machine; every command
reads it and passes the user id explicitly into the service call.
"""

import json
import os
import sys
import uuid

from taskcli.settings import get_home


def _session_file() -> str:
    return os.path.join(get_home(), "session.json")


def save_session(user_id: uuid.UUID, username: str):
    """Save the logged-in user to session.json."""
    path = _session_file()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w") as f:
        json.dump({"user_id": str(user_id), "username": username}, f)
    os.chmod(path, 0o600)


def load_session() -> dict:
    """Load session.json. Exits when nobody is logged in."""
    path = _session_file()
    if not os.path.exists(path):
        print("Not logged in. Run 'tasktrack login' first.", file=sys.stderr)
        sys.exit(1)
    with open(path) as f:
        return json.load(f)


def remove_session() -> bool:
    path = _session_file()
    if os.path.exists(path):
        os.remove(path)
        return True
    return False


def get_cli_user_id() -> uuid.UUID:
    return uuid.UUID(load_session()["user_id"])
