"""
Date and GUID heuristics used to decide whether a kill switch has graduated.

Comment formats are free text, so date extraction is best effort: a date that
is written in an unsupported format is simply missed, and a substring that
happens to parse as a date is taken at face value.
"""

import re
from datetime import datetime
from typing import Iterator, List, Optional

import libcst as cst

from .time_utils import as_utc

# Same acceptance as the npm ``uuid`` validator: versions 1-8, RFC 4122
# variant, plus the nil and max UUIDs.
_UUID_PATTERN = re.compile(
    r"(?:[0-9a-f]{8}-[0-9a-f]{4}-[1-8][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}"
    r"|00000000-0000-0000-0000-000000000000"
    r"|ffffffff-ffff-ffff-ffff-ffffffffffff)",
    re.IGNORECASE,
)

_MONTH = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?"
_ORDINAL = r"(?:st|nd|rd|th)?"

_DATE_CANDIDATE = re.compile(
    r"(?<![\w/-])(?:"
    r"\d{4}-\d{1,2}-\d{1,2}(?:[T ]\d{1,2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?"
    r"|\d{4}/\d{1,2}/\d{1,2}"
    r"|\d{1,2}/\d{1,2}/\d{4}"
    rf"|{_MONTH}\s+\d{{1,2}}{_ORDINAL},?\s+\d{{4}}"
    rf"|\d{{1,2}}{_ORDINAL}\s+{_MONTH},?\s+\d{{4}}"
    r")(?![\w/])",
    re.IGNORECASE,
)

_STRPTIME_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
)


def is_valid_uuid(value: Optional[str]) -> bool:
    """Check that ``value`` is a structurally valid UUID string."""
    if not isinstance(value, str):
        return False
    return bool(_UUID_PATTERN.fullmatch(value))


def _normalize(text: str) -> str:
    text = re.sub(r"(\d)(st|nd|rd|th)\b", r"\1", text, flags=re.IGNORECASE)
    text = text.replace(",", " ").replace(".", " ")
    text = re.sub(r"\bsept\b", "sep", text, flags=re.IGNORECASE)
    return " ".join(text.split())


def parse_date(text: Optional[str]) -> Optional[datetime]:
    """
    Parse a date string into an aware UTC datetime.

    Accepts ISO 8601 dates and datetimes (with or without ``Z``), slash
    separated dates and written month names. Returns None when the text is
    not a valid calendar date.
    """
    if not text:
        return None
    candidate = text.strip()
    if not candidate:
        return None

    iso = candidate[:-1] + "+00:00" if candidate.endswith(("Z", "z")) else candidate
    try:
        return as_utc(datetime.fromisoformat(iso))
    except ValueError:
        pass

    normalized = _normalize(candidate)
    for fmt in _STRPTIME_FORMATS:
        try:
            return as_utc(datetime.strptime(normalized, fmt))
        except ValueError:
            continue
    return None


def find_first_date(text: str) -> Optional[datetime]:
    """Return the first substring of ``text`` that parses as a calendar date."""
    for match in _DATE_CANDIDATE.finditer(text):
        parsed = parse_date(match.group(0))
        if parsed is not None:
            return parsed
    return None


class _CommentCollector(cst.CSTVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.comments: List[str] = []

    def visit_Comment(self, node: cst.Comment) -> None:
        self.comments.append(node.value)


def iter_attached_comments(function: cst.FunctionDef) -> Iterator[str]:
    """
    Yield comment text attached to a function, in source order.

    Covers comment lines above the function and its decorators, the trailing
    comment of the ``def`` line, comments inside the body and finally the
    docstring.
    """
    collector = _CommentCollector()
    function.visit(collector)
    yield from collector.comments
    docstring = function.get_docstring()
    if docstring:
        yield docstring


def extract_date_from_comments(function: cst.FunctionDef) -> Optional[datetime]:
    """Find the first date mentioned in the comments attached to ``function``."""
    for text in iter_attached_comments(function):
        found = find_first_date(text)
        if found is not None:
            return found
    return None
