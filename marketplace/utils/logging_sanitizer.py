"""
Logging Sanitizer Utility

Redacts sensitive values from request payloads before they are logged.
Order payloads carry payment references (transaction ids) that must not land in log files.
"""

from typing import Dict, Any


# Fields that should never be logged
SENSITIVE_FIELDS = {
    'password',
    'current_password',
    'new_password',
    'secret',
    'token',
    'api_key',
    'access_token',
    'refresh_token',
    'session_id',
    'csrf_token',
    'transaction_id',
    'transactionid',
    'card_number',
    'cvv',
}


def _normalize_key(key: str) -> str:
    return str(key).lower().replace('-', '_')


def sanitize_dict(data: Dict[str, Any], redact_text: str = '[REDACTED]') -> Dict[str, Any]:
    """
    Sanitize a dictionary by replacing sensitive field values with redaction text.

    Keys are matched case-insensitively, so ``transactionId`` and
    ``transaction_id`` are both redacted.

    Example:
        >>> sanitize_dict({'listingId': 'abc', 'transactionId': 'txn_1'})
        {'listingId': 'abc', 'transactionId': '[REDACTED]'}
    """
    if not data:
        return data

    sanitized = {}
    for key, value in data.items():
        if _normalize_key(key) in SENSITIVE_FIELDS:
            sanitized[key] = redact_text
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, redact_text)
        elif isinstance(value, list):
            # e.g. a batch of order dicts
            sanitized[key] = [
                sanitize_dict(item, redact_text) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            sanitized[key] = value

    return sanitized


def sanitize_exception_message(exception: Exception) -> str:
    """Return the exception message unless it looks like it contains sensitive data"""
    message = str(exception)

    if any(field in message.lower() for field in SENSITIVE_FIELDS):
        return f"{type(exception).__name__}: [Message contains sensitive data]"

    return message
