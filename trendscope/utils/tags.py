"""
Tag extraction utility.

Normalizes the pipe-delimited tag strings embedded in each video row and
drops filler tokens ("none", "[n/a]", ...) before anything is counted.
"""

import re
from typing import List, Optional

FILLER_TAGS = frozenset([
    "none", "n/a", "na", "null", "undefined",
    "no tag", "no tags", "notag", "notags",
    "empty", "blank", "-", "_", ".",
])

# "none" as a whole word: leading, trailing or interior
_NONE_WORD = re.compile(r"(?:^|\s)none(?:\s|$)")


def normalize_tag(token: str) -> str:
    """Strip quotes, trim and lowercase one raw token."""
    return token.replace('"', "").strip().lower()


def is_valid_tag(tag: str, max_length: int) -> bool:
    """
    Check a normalized tag against the cleaning rules.

    Rejects empty tags, tags of length <= 2 or >= max_length, filler tokens
    (bare or wrapped in one layer of brackets) and phrases with "none" as a
    standalone word.
    """
    if not tag or len(tag) <= 2 or len(tag) >= max_length:
        return False

    if tag in FILLER_TAGS:
        return False

    if tag.startswith("[") and tag.endswith("]") and tag[1:-1] in FILLER_TAGS:
        return False

    if _NONE_WORD.search(tag):
        return False

    return True


def extract_tags(
    raw: Optional[str],
    max_length: int = 30,
    per_row_limit: Optional[int] = None
) -> List[str]:
    """
    Split and clean a raw tag string.

    Args:
        raw: Pipe-delimited tag string, e.g. '"gaming"|"minecraft"'
        max_length: Exclusive upper bound on tag length
        per_row_limit: Keep at most this many tags (None = no cap)

    Returns:
        Cleaned tags in input order
    """
    if not raw:
        return []

    tags = [tag for tag in (normalize_tag(t) for t in raw.split("|")) if is_valid_tag(tag, max_length)]

    if per_row_limit is not None:
        tags = tags[:per_row_limit]
    return tags
