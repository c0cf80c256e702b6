"""Identifier generation for persisted entities."""

import secrets

OBJECT_ID_LENGTH = 24


def new_object_id() -> str:
    """Return a random 24-character hex identifier."""
    return secrets.token_hex(OBJECT_ID_LENGTH // 2)
