"""
Template filters and the pipeline that chains them.

A placeholder looks like ``{{ variable | filter:arg1,"arg 2" | other }}``.
Every filter is a pure function ``(value, *args) -> value`` applied left to
right. Filter names that are not registered are an error, never a no-op.
"""

import math
import re
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from .content import DEFAULT_WORDS_PER_MINUTE, calculate_reading_time, count_words
from .errors import FilterArgumentError, TemplateSyntaxError, UnknownFilterError


FilterFunction = Callable[..., Any]
FilterCall = Tuple[str, List[str]]


class _Hidden:
    """Marker returned by hideif: the whole expression renders to nothing."""

    def __repr__(self) -> str:
        return "HIDDEN"


HIDDEN = _Hidden()

_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

_DATE_TOKENS = re.compile(r'\[[^\]]*\]|YYYY|YY|MMMM|MMM|MM|M|DD|D|dddd|ddd|HH|H|hh|h|mm|ss|A')


def to_text(value: Any) -> str:
    """Render a context value as text."""
    if value is None or value is HIDDEN:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(to_text(v) for v in value)
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _to_int(filter_name: str, raw: Any) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise FilterArgumentError(filter_name, f"expected an integer, got {raw!r}")


def truncate(value: Any, length: Any = None, suffix: str = "") -> str:
    """Cut to `length` characters; a suffix (e.g. "…") counts toward the limit."""
    if length is None:
        raise FilterArgumentError("truncate", "missing length")
    limit = _to_int("truncate", length)
    if limit < 0:
        raise FilterArgumentError("truncate", "length must not be negative")

    text = to_text(value)
    if len(text) <= limit:
        return text
    if suffix and len(suffix) < limit:
        return text[:limit - len(suffix)].rstrip() + suffix
    return text[:limit]


def default_value(value: Any, fallback: str = "") -> Any:
    if to_text(value).strip() == "":
        return fallback
    return value


def lower(value: Any) -> str:
    return to_text(value).lower()


def upper(value: Any) -> str:
    return to_text(value).upper()


def capitalize(value: Any) -> str:
    text = to_text(value)
    return text[:1].upper() + text[1:]


def strip(value: Any, chars: Optional[str] = None) -> str:
    return to_text(value).strip(chars)


def trim(value: Any) -> str:
    """Collapse whitespace runs into single spaces and strip the ends."""
    return " ".join(to_text(value).split())


def wordcount(value: Any) -> int:
    return count_words(to_text(value))


def readtime(value: Any, words_per_minute: Any = DEFAULT_WORDS_PER_MINUTE) -> int:
    """Reading time in minutes. Numbers are taken as a word count."""
    wpm = _to_int("readtime", words_per_minute)
    if wpm <= 0:
        raise FilterArgumentError("readtime", "words per minute must be positive")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return math.ceil(value / wpm)
    return calculate_reading_time(to_text(value), wpm)


def _parse_date(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = to_text(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _format_token(dt: datetime, token: str) -> str:
    if token.startswith("["):
        return token[1:-1]
    hour12 = dt.hour % 12 or 12
    return {
        "YYYY": f"{dt.year:04d}",
        "YY": f"{dt.year % 100:02d}",
        "MMMM": MONTH_NAMES[dt.month - 1],
        "MMM": MONTH_NAMES[dt.month - 1][:3],
        "MM": f"{dt.month:02d}",
        "M": str(dt.month),
        "DD": f"{dt.day:02d}",
        "D": str(dt.day),
        "dddd": DAY_NAMES[dt.weekday()],
        "ddd": DAY_NAMES[dt.weekday()][:3],
        "HH": f"{dt.hour:02d}",
        "H": str(dt.hour),
        "hh": f"{hour12:02d}",
        "h": str(hour12),
        "mm": f"{dt.minute:02d}",
        "ss": f"{dt.second:02d}",
        "A": "AM" if dt.hour < 12 else "PM",
    }[token]


def format_date(value: Any, pattern: str = "YYYY-MM-DD") -> str:
    """
    Format a date with YYYY/MM/DD-style tokens (``[text]`` is literal).

    A pattern containing ``%`` is passed to strftime instead. Values that
    are not dates are returned unchanged.
    """
    dt = _parse_date(value)
    if dt is None:
        return to_text(value)
    if "%" in pattern:
        return dt.strftime(pattern)
    return _DATE_TOKENS.sub(lambda m: _format_token(dt, m.group(0)), pattern)


def first(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[0] if value else ""
    return value


def last(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[-1] if value else ""
    return value


def replace(value: Any, old: str = "", new: str = "") -> str:
    text = to_text(value)
    if not old:
        return text
    return text.replace(old, new)


def join(value: Any, separator: str = ", ") -> str:
    if isinstance(value, (list, tuple)):
        return separator.join(to_text(v) for v in value)
    return to_text(value)


def wrap(value: Any, prefix: str = "", suffix: str = "") -> str:
    text = to_text(value)
    if not text:
        return ""
    return f"{prefix}{text}{suffix}"


def hideif(value: Any, condition: Optional[str] = None) -> Any:
    """Hide when empty, or when equal to `condition` (case-insensitive)."""
    text = to_text(value).strip()
    if condition is None:
        hidden = text == ""
    else:
        hidden = text.lower() == condition.strip().lower()
    return HIDDEN if hidden else value


DEFAULT_FILTERS: Dict[str, FilterFunction] = {
    "truncate": truncate,
    "default": default_value,
    "defaultValue": default_value,
    "lower": lower,
    "upper": upper,
    "capitalize": capitalize,
    "strip": strip,
    "wordcount": wordcount,
    "readtime": readtime,
    "format": format_date,
    "first": first,
    "last": last,
    "replace": replace,
    "trim": trim,
    "join": join,
    "wrap": wrap,
    "hideif": hideif,
}


def split_unquoted(text: str, separator: str) -> List[str]:
    """Split on a separator character, ignoring separators inside quotes."""
    parts: List[str] = []
    current: List[str] = []
    quote: Optional[str] = None

    for ch in text:
        if quote:
            current.append(ch)
            if ch == quote:
                quote = None
        elif ch in ('"', "'"):
            quote = ch
            current.append(ch)
        elif ch == separator:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)

    if quote:
        raise TemplateSyntaxError("Unterminated quote", text)
    parts.append("".join(current))
    return parts


def _unquote(arg: str) -> str:
    arg = arg.strip()
    if len(arg) >= 2 and arg[0] == arg[-1] and arg[0] in ('"', "'"):
        return arg[1:-1]
    return arg


def parse_filter_expression(expression: str) -> Tuple[str, List[FilterCall]]:
    """
    Parse the inside of a placeholder.

    >>> parse_filter_expression('title | truncate:50,"…"')
    ('title', [('truncate', ['50', '…'])])
    """
    parts = split_unquoted(expression, "|")
    variable = parts[0].strip()
    if not _IDENTIFIER.match(variable):
        raise TemplateSyntaxError(f"Invalid variable name {variable!r}", expression)

    calls: List[FilterCall] = []
    for part in parts[1:]:
        part = part.strip()
        name, sep, raw_args = part.partition(":")
        name = name.strip()
        if not _IDENTIFIER.match(name):
            raise TemplateSyntaxError(f"Invalid filter name {name!r}", expression)
        args = [_unquote(a) for a in split_unquoted(raw_args, ",")] if sep else []
        calls.append((name, args))

    return variable, calls


def apply_filters(
    value: Any,
    calls: List[FilterCall],
    registry: Optional[Dict[str, FilterFunction]] = None,
    expression: Optional[str] = None
) -> Any:
    """Run a filter chain. Unknown names fail before any filter runs."""
    filters = DEFAULT_FILTERS if registry is None else registry

    for name, _ in calls:
        if name not in filters:
            raise UnknownFilterError(name, expression)

    for name, args in calls:
        if value is HIDDEN:
            break
        try:
            value = filters[name](value, *args)
        except TypeError as e:
            raise FilterArgumentError(name, str(e)) from e

    return value
