from .heuristics import extract_date_from_comments, find_first_date, is_valid_uuid, parse_date
from .node_utils import is_ancestor_of, iter_ancestors, unwrap_block
from .time_utils import as_utc, default_threshold_date, is_before, utc_now

__all__ = [
    "extract_date_from_comments",
    "find_first_date",
    "is_valid_uuid",
    "parse_date",
    "is_ancestor_of",
    "iter_ancestors",
    "unwrap_block",
    "as_utc",
    "default_threshold_date",
    "is_before",
    "utc_now",
]
