"""
Property Wizard - Sensitive Field Security

Role-based visibility, editability and redaction of internal-only fields.
"""

from property_wizard.security.sensitive_fields import (
    Role,
    SensitiveFieldPolicy,
    PolicyViolation,
    SENSITIVE_FIELDS,
    PRIVILEGED_ROLES,
    LOCKED_PLACEHOLDER,
    DEFAULT_POLICY,
)

__all__ = [
    "Role",
    "SensitiveFieldPolicy",
    "PolicyViolation",
    "SENSITIVE_FIELDS",
    "PRIVILEGED_ROLES",
    "LOCKED_PLACEHOLDER",
    "DEFAULT_POLICY",
]
