"""
Ordered field-precedence rules for upstream records.

Every canonical field is described by a tuple of ``FieldRule(source, parser)``
pairs. ``pick`` walks the tuple in order and returns the first parsed value
that is not None, so the precedence between provider field names is data,
not branching.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence

# Upstream placeholders meaning "no value"
MISSING_SENTINELS = frozenset({"", "NA", "N/A", "NAN", "NULL", "NONE"})

Parser = Callable[[Any], Any]


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and value.strip().upper() in MISSING_SENTINELS:
        return True
    return False


def parse_number(value: Any) -> Optional[float]:
    """Finite float or None. ``"NA"`` and friends are None, never 0 or NaN."""
    if is_missing(value) or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_positive(value: Any) -> Optional[float]:
    number = parse_number(value)
    if number is None or number <= 0:
        return None
    return number


def parse_text(value: Any) -> Optional[str]:
    if is_missing(value):
        return None
    if isinstance(value, (dict, list)):
        return None
    return str(value).strip()


def parse_raw_text(value: Any) -> Optional[str]:
    """Like ``parse_text`` but keeps present values verbatim (no strip)."""
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, str) and value.strip().upper() in MISSING_SENTINELS:
        return None
    return str(value)


def parse_lower(value: Any) -> Optional[str]:
    text = parse_text(value)
    return text.lower() if text else None


def parse_list(value: Any) -> Optional[List[str]]:
    if isinstance(value, list):
        return [str(item) for item in value if not is_missing(item)]
    if isinstance(value, str) and value.strip() and not is_missing(value):
        return [part.strip() for part in value.split(",") if part.strip()]
    return None


@dataclass(frozen=True)
class FieldRule:
    source: str
    parser: Parser


def rules(parser: Parser, *sources: str) -> Sequence[FieldRule]:
    """Shorthand for several sources sharing one parser, in order."""
    return tuple(FieldRule(source, parser) for source in sources)


def pick(raw: Mapping[str, Any], field_rules: Sequence[FieldRule]) -> Any:
    for rule in field_rules:
        if rule.source not in raw:
            continue
        value = rule.parser(raw[rule.source])
        if value is not None:
            return value
    return None


def records(payload: Any) -> List[Mapping[str, Any]]:
    """Row list from a bare array or a ``{"data": [...]}`` wrapper."""
    if isinstance(payload, Mapping):
        payload = payload.get("data")
    if not isinstance(payload, list):
        return []
    return [row for row in payload if isinstance(row, Mapping)]
