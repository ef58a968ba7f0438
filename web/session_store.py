"""
Wizard Session Store - In-Memory Registry of Live Wizard Sessions

The core keeps no global session state; the web layer owns one
WizardController per browser session here.
"""

from __future__ import annotations

from typing import Optional
from uuid import uuid4

from property_wizard.session import WizardController


class WizardSessionStore:
    """Maps session ids to live controllers."""

    def __init__(self):
        self._sessions: dict[str, WizardController] = {}

    def add(self, controller: WizardController) -> str:
        """
        Register a controller.

        Returns:
            New session id
        """
        session_id = f"WIZ-{uuid4().hex[:12].upper()}"
        self._sessions[session_id] = controller
        return session_id

    def get(self, session_id: str) -> Optional[WizardController]:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        """
        Drop a session.

        Returns:
            True if removed, False if not found
        """
        return self._sessions.pop(session_id, None) is not None

    def count(self) -> int:
        return len(self._sessions)


# =============================================================================
# Singleton Instance
# =============================================================================

_store_instance: Optional[WizardSessionStore] = None


def get_session_store() -> WizardSessionStore:
    """Get the session store singleton."""
    global _store_instance
    if _store_instance is None:
        _store_instance = WizardSessionStore()
    return _store_instance


def reset_session_store() -> None:
    """Drop every live session (tests, restarts)."""
    global _store_instance
    _store_instance = None
