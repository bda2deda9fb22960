"""Per-send tracking ids (abuse-report link + analytics key)."""

import uuid


def new_tracking_id() -> str:
    # uuid4 draws from os.urandom
    return str(uuid.uuid4())
