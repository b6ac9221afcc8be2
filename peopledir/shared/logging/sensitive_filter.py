# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Scrub credentials and personal data from log messages."""

from __future__ import annotations

import re
from typing import Any

_REDACTED = "***REDACTED***"

_RULES: list[tuple[re.Pattern[str], str]] = [
    # Session tokens: keep a short prefix so log lines can still be correlated.
    (re.compile(r"\b([0-9a-f]{8})[0-9a-f]{56}\b"), r"\1…"),
    (re.compile(r"((?:x-auth-token|bearer)\s*[:=]?\s*['\"]?)[^'\"\s,]{10,}", re.I), rf"\1{_REDACTED}"),
    (re.compile(r"(password(?:_hash)?\s*[:=]\s*['\"]?)[^'\"\s,}]+", re.I), rf"\1{_REDACTED}"),
    (re.compile(r"scrypt:\d+:\d+:\d+\$[^\s'\",]+"), f"scrypt:{_REDACTED}"),
    (re.compile(r"(\w+(?:\+\w+)?://[^:/\s]+):[^@\s]+@"), rf"\1:{_REDACTED}@"),
    (re.compile(r"[\w.%+-]+@([\w-]+(?:\.[\w-]+)*\.[a-zA-Z]{2,})"), r"***@\1"),
    (re.compile(r"(number\s*[:=]\s*['\"]?)\+?[\d\-\s()/]{5,}"), r"\1***-****"),
]


def sanitize_message(message: str) -> str:
    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    """Loguru filter: rewrites the message in place and never drops a record."""

    record["message"] = sanitize_message(record["message"])
    return True
