"""
Request Identity - Role Resolution for Wizard Routes

Stand-in for the external session layer: the caller's role arrives in the
X-User-Role header. Authentication is out of scope; this module only turns
the header into a Role.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Header, HTTPException

from property_wizard.security import Role
from utils.config import Config


ROLE_HEADER = "X-User-Role"


def resolve_role(x_user_role: Optional[str] = Header(None)) -> Role:
    """
    FastAPI dependency resolving the caller's role.

    A missing header falls back to the configured default role.

    Raises:
        HTTPException(400) if the role is not recognised
    """
    value = x_user_role or Config.load().default_role
    role = Role.from_string(value)
    if role is None:
        raise HTTPException(status_code=400, detail=f"Unknown role: {value}")
    return role
