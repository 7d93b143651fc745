"""
Single-pattern scanning with overlap rejection.

A candidate is kept only if it does not touch any span that an earlier
detector already claimed.
"""

from typing import Callable, Iterable, List, Optional, Sequence

from .patterns import Match


def overlaps(start: int, end: int, existing: Iterable[Match]) -> bool:
    """Check if [start, end) shares a position with any existing match."""
    for m in existing:
        if start < m.end and m.index < end:
            return True
    return False


def scan(
    text: str,
    matcher,
    type_tag: str,
    reject_lists: Sequence[Sequence[Match]] = (),
    validator: Optional[Callable[[str], bool]] = None,
) -> List[Match]:
    """
    Apply one compiled regex to text.

    Args:
        text: Input text
        matcher: Compiled regex
        type_tag: Type reported on every resulting match
        reject_lists: Match lists; hits overlapping any member are dropped
        validator: Optional filter on the matched value

    Returns:
        Matches in left-to-right order
    """
    matches = []

    for m in matcher.finditer(text):
        value = m.group()
        if validator is not None and not validator(value):
            continue

        start, end = m.start(), m.end()
        if any(overlaps(start, end, existing) for existing in reject_lists):
            continue

        matches.append(Match(value=value, index=start, type=type_tag))

    return matches
