"""
Sensitive Field Policy - Role-Based Visibility, Masking and Redaction

A fixed set of property fields (door codes, WiFi password, utility logins,
listing platform credentials) is internal-only. Privileged roles may view
and edit them; every other role must never receive them, not as a value
and not as a key, at any depth of any serialized payload.

All role decisions in the package go through SensitiveFieldPolicy.
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Final, Iterable, Mapping, Optional, Union


# =============================================================================
# Exceptions
# =============================================================================


class PolicyViolation(Exception):
    """Raised when a role edits a field it may not, or a payload leaks one."""

    def __init__(self, message: str, field_name: Optional[str] = None):
        self.field_name = field_name
        super().__init__(message)


# =============================================================================
# Roles
# =============================================================================


class Role(Enum):
    """User role, supplied by the external identity layer per operation."""

    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"
    READONLY = "readonly"

    @classmethod
    def from_string(cls, value: str) -> Optional["Role"]:
        """Convert string to Role, case-insensitive."""
        normalised = value.lower().strip()
        for member in cls:
            if member.value == normalised:
                return member
        return None


RoleLike = Union[Role, str, None]


# =============================================================================
# Constants
# =============================================================================

SENSITIVE_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "wifi_password",
        "smart_lock_code",
        "utility_accounts",
        "listing_credentials",
    }
)

PRIVILEGED_ROLES: Final[frozenset[Role]] = frozenset({Role.ADMIN, Role.MANAGER})

# Shown in place of a sensitive value to roles that may not see it
LOCKED_PLACEHOLDER: Final[str] = "********"

MASK_CHAR: Final[str] = "*"
SHORT_MASK: Final[str] = "****"
MASK_VISIBLE_CHARS: Final[int] = 2


# =============================================================================
# Policy
# =============================================================================


def _segments(path: str) -> list[str]:
    return str(path).split(".")


class SensitiveFieldPolicy:
    """
    Decides, per role, which fields are visible, editable or redacted.

    Roles may be given as Role members or role strings. Unknown or missing
    roles are never privileged.
    """

    sensitive_fields: frozenset[str] = SENSITIVE_FIELDS
    privileged_roles: frozenset[Role] = PRIVILEGED_ROLES

    # =========================================================================
    # Decisions
    # =========================================================================

    def is_privileged(self, role: RoleLike) -> bool:
        if isinstance(role, str):
            role = Role.from_string(role)
        return role in self.privileged_roles

    def is_sensitive(self, field_name: str) -> bool:
        """Check a field name or dotted path; judged by its leading segment."""
        return _segments(field_name)[0] in self.sensitive_fields

    def can_view(self, role: RoleLike, field_name: str) -> bool:
        return self.is_privileged(role) or not self.is_sensitive(field_name)

    def can_edit(self, role: RoleLike, field_name: str) -> bool:
        # Locked inputs are read-only as well as hidden
        return self.can_view(role, field_name)

    def visible_fields(self, role: RoleLike, field_names: Iterable[str]) -> list[str]:
        """Filter a field list down to what the role may render."""
        return [name for name in field_names if self.can_view(role, name)]

    # =========================================================================
    # Redaction
    # =========================================================================

    def _names_sensitive(self, key: Any) -> bool:
        return any(segment in self.sensitive_fields for segment in _segments(key))

    def _strip(self, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {
                key: self._strip(item)
                for key, item in value.items()
                if not self._names_sensitive(key)
            }
        if isinstance(value, list):
            return [self._strip(item) for item in value]
        if isinstance(value, tuple):
            return tuple(self._strip(item) for item in value)
        return copy.deepcopy(value)

    def sanitize(self, snapshot: Mapping[str, Any], role: RoleLike) -> dict[str, Any]:
        """
        Prepare a snapshot for a consumer acting under a role.

        Privileged roles get a deep copy. Everyone else gets a deep copy
        with every sensitive key removed at every depth. The input is
        never modified.

        Args:
            snapshot: Field name to value
            role: Consumer role

        Returns:
            New dict safe to serialize for the role
        """
        if self.is_privileged(role):
            return copy.deepcopy(dict(snapshot))
        return self._strip(snapshot)

    def sanitize_errors(self, errors: Mapping[str, str], role: RoleLike) -> dict[str, str]:
        """Drop error entries whose path names a sensitive field."""
        if self.is_privileged(role):
            return dict(errors)
        return {
            path: message
            for path, message in errors.items()
            if not self._names_sensitive(path)
        }

    def assert_sanitized(self, payload: Any, role: RoleLike) -> None:
        """
        Check that a payload carries no sensitive key for a non-privileged role.

        Raises:
            PolicyViolation: If a sensitive key is present at any depth
        """
        if self.is_privileged(role):
            return

        pending = [payload]
        while pending:
            value = pending.pop()
            if isinstance(value, Mapping):
                for key, item in value.items():
                    if self._names_sensitive(key):
                        raise PolicyViolation(
                            f"Sensitive field {key} exposed to a non-privileged role",
                            field_name=str(key),
                        )
                    pending.append(item)
            elif isinstance(value, (list, tuple)):
                pending.extend(value)

    # =========================================================================
    # Display
    # =========================================================================

    @staticmethod
    def mask(value: Optional[str]) -> str:
        """
        Mask a secret for display to a privileged user.

        Empty gives "". Four characters or fewer give "****". Longer values
        keep their first and last two characters and their length.
        """
        if not value:
            return ""
        text = str(value)
        if len(text) <= len(SHORT_MASK):
            return SHORT_MASK
        hidden = MASK_CHAR * (len(text) - 2 * MASK_VISIBLE_CHARS)
        return text[:MASK_VISIBLE_CHARS] + hidden + text[-MASK_VISIBLE_CHARS:]

    def display_value(
        self,
        role: RoleLike,
        field_name: str,
        value: Any,
        reveal: bool = False,
    ) -> Any:
        """
        Value to show in a rendered form field.

        Non-sensitive values pass through. Privileged roles see the masked
        secret, or the real value when they ask to reveal it. Other roles
        get the locked placeholder. Structured secrets (utility accounts)
        have no text form and show the placeholder until revealed.
        """
        if not self.is_sensitive(field_name):
            return value
        if not self.is_privileged(role):
            return LOCKED_PLACEHOLDER
        if reveal:
            return value
        if value is None or isinstance(value, str):
            return self.mask(value)
        return LOCKED_PLACEHOLDER


DEFAULT_POLICY: Final[SensitiveFieldPolicy] = SensitiveFieldPolicy()
