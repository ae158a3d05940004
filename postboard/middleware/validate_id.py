"""
Postboard — Identifier Shape Guard
====================================

What:  First guard in every /{id} route: the path id must parse as a UUID.
How:   FastAPI dependency returning the parsed UUID; a malformed id raises
       ValidationError (400 "Invalid id") before authentication or any
       database work happens.
"""

import uuid

from fastapi import Path

from postboard.exceptions import ValidationError


def validate_object_id(id: str = Path(description="Resource id (UUID)")) -> uuid.UUID:
    try:
        return uuid.UUID(id)
    except ValueError:
        raise ValidationError(message="Invalid id", field="id")
