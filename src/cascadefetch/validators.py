"""Reusable validation predicates for resolve().

Payloads are either decoded JSON (dict, list, scalar) or text. Every
predicate here returns False rather than raising on an unexpected shape.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from cascadefetch.models import ValidationPredicate


def truthy(payload: Any) -> bool:
    """Accept any non-empty payload."""
    if isinstance(payload, str):
        return bool(payload.strip())
    return bool(payload)


def is_json_object(payload: Any) -> bool:
    return isinstance(payload, Mapping)


def is_non_empty_list(payload: Any) -> bool:
    return isinstance(payload, list) and len(payload) > 0


def has_keys(*keys: str) -> ValidationPredicate:
    """Accept JSON objects carrying every one of the given keys."""

    def predicate(payload: Any) -> bool:
        return isinstance(payload, Mapping) and all(k in payload for k in keys)

    return predicate


def has_any_key(*keys: str) -> ValidationPredicate:
    """Accept JSON objects carrying at least one of the given keys with a truthy value."""

    def predicate(payload: Any) -> bool:
        return isinstance(payload, Mapping) and any(payload.get(k) for k in keys)

    return predicate


def matches(pattern: str | re.Pattern[str]) -> ValidationPredicate:
    """Accept text payloads containing the regex pattern."""
    regex = re.compile(pattern)

    def predicate(payload: Any) -> bool:
        return isinstance(payload, str) and regex.search(payload) is not None

    return predicate


def any_of(*predicates: ValidationPredicate) -> ValidationPredicate:
    def predicate(payload: Any) -> bool:
        return any(p(payload) for p in predicates)

    return predicate


def all_of(*predicates: ValidationPredicate) -> ValidationPredicate:
    def predicate(payload: Any) -> bool:
        return all(p(payload) for p in predicates)

    return predicate
