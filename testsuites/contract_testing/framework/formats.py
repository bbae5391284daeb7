"""
================================================================================
String Format Predicates
================================================================================

Predicates for the string ``format`` keyword. The strictness of each check is
part of the public contract; bump FORMAT_CONTRACT_VERSION when it changes.

Formats:
    - email:     local@domain.tld, single line, no whitespace
    - uri:       absolute http(s)/ftp(s)/ws(s) URI with a host
    - date-time: RFC 3339 timestamp with time zone (date-only is rejected)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from datetime import datetime
from urllib.parse import urlsplit

from .schema_model import MalformedSchema


FORMAT_CONTRACT_VERSION = "1"

EMAIL_PATTERN = re.compile(
    r"^[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@(?:[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?\.)+"
    r"[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$"
)

DATE_TIME_PATTERN = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)

URI_SCHEMES = ("http", "https", "ftp", "ftps", "ws", "wss")


def is_email(value: str) -> bool:
    """Check email shape: local part, '@', dotted domain."""
    return bool(EMAIL_PATTERN.fullmatch(value))


def is_uri(value: str) -> bool:
    """Check for an absolute URI with a supported scheme and a host."""
    if any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme.lower() in URI_SCHEMES and bool(parts.netloc)


def is_date_time(value: str) -> bool:
    """
    Check for an RFC 3339 date-time that names a real calendar instant.

    '2023-01-01T12:00:00Z' passes, '2023-01-01' and '2023-02-30T00:00:00Z'
    do not.
    """
    match = DATE_TIME_PATTERN.fullmatch(value)
    if not match:
        return False

    date_part, time_part, _, offset = match.groups()
    try:
        datetime.strptime(f"{date_part}T{time_part}", "%Y-%m-%dT%H:%M:%S")
    except ValueError:
        return False

    if offset.upper() != "Z":
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        if hours > 23 or minutes > 59:
            return False
    return True


_FORMAT_CHECKS = {
    "email": is_email,
    "uri": is_uri,
    "date-time": is_date_time,
}

SUPPORTED_FORMATS = tuple(_FORMAT_CHECKS)


def check_format(format_name: str, value: str) -> bool:
    """
    Check a string against a named format.

    Raises:
        MalformedSchema: If the format name is not supported
    """
    checker = _FORMAT_CHECKS.get(format_name)
    if checker is None:
        raise MalformedSchema(f"Unsupported format {format_name!r}")
    return checker(value)


__all__ = [
    "FORMAT_CONTRACT_VERSION",
    "SUPPORTED_FORMATS",
    "URI_SCHEMES",
    "is_email",
    "is_uri",
    "is_date_time",
    "check_format",
]
