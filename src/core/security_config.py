"""Security configuration constants for the email assistant API.

This module centralizes security-related configuration including:
- Sensitive keys that should be sanitized from logs
- Error handling security settings
"""

# Keys redacted from structured log entries. Matching is by substring, so
# "smtp_password" and "x-api-key" are covered by "password" and "api_key".
SENSITIVE_KEYS: set[str] = {
    # Credentials
    "password",
    "passwd",
    "secret",
    "token",
    "access_token",
    "authorization",
    "auth_token",
    "api_key",
    "apikey",
    "bearer",
    "credential",
    # Message content
    "prompt",
    "body",
    "content",
    # Headers
    "set-cookie",
    "cookie",
    "x-api-key",
    "authentication",
}

# Production-only error response fields
# In production, error responses should only contain these fields to
# prevent information leakage
PRODUCTION_ERROR_FIELDS: set[str] = {
    "details",
}

# Development error response fields (additional fields allowed in development)
DEVELOPMENT_ERROR_FIELDS: set[str] = PRODUCTION_ERROR_FIELDS | {
    "traceback",
    "exception_type",
}


def get_allowed_error_fields(environment: str) -> set[str]:
    """Get allowed error response fields based on environment.

    Args:
        environment: The application environment (production, development, etc.)

    Returns:
        Set of allowed field names for error responses
    """
    if environment == "production":
        return PRODUCTION_ERROR_FIELDS.copy()
    else:
        return DEVELOPMENT_ERROR_FIELDS.copy()


def is_sensitive_key(key: str) -> bool:
    """Check if a key should be considered sensitive and redacted.

    Args:
        key: The key name to check

    Returns:
        True if the key should be redacted, False otherwise
    """
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)
