"""Error sanitization utilities to prevent information leakage."""

import re


# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"access[_\s]?key[_\s]?id[:\s]+([A-Z0-9]{20})",
    r"secret[_\s]?access[_\s]?key[:\s]+([A-Za-z0-9/+=]{40})",
    r"session[_\s]?token[:\s]+([A-Za-z0-9/+=]+)",
    r"arn:aws:iam::\d+:user/([a-zA-Z0-9\-_]+)",
    r"master[_\s]?user[_\s]?password\s*[:=]\s*([^\s,;\)]+)",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "access_key_id",
    "secret_access_key",
    "session_token",
    "masteruserpassword",
    "password",
    "secret",
    "credentials",
    "token",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, "[REDACTED]", sanitized, flags=re.IGNORECASE)

    # Replace field: value patterns
    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"\b{field}\s*[:=]\s*([^\s,;\)]+)",
            rf"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: BaseException) -> str:
    """Sanitize exception message.

    Args:
        error: Exception object

    Returns:
        Sanitized error message
    """
    return sanitize_error_message(str(error))
