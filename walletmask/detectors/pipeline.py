"""
Scan orchestrator.

Runs every enabled stage once, in precedence order. Each stage sees all
matches accepted so far and may only claim untouched spans. The result is
sorted by position, so callers can splice it straight into the text.
"""

import logging
import threading
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from .families import DEFAULT_STAGES, FAMILIES, Stage, run_stage
from .patterns import Match, PatternRegistry, get_registry

logger = logging.getLogger(__name__)


class WalletDetector:
    """
    Multi-pattern wallet identifier detector.

    Usage:
        detector = WalletDetector()
        matches = detector.detect(text)

        # Only Ethereum addresses and ENS names
        detector = WalletDetector(families=['eth', 'ens'])
    """

    def __init__(
        self,
        families: Optional[Iterable[str]] = None,
        stages: Sequence[Stage] = DEFAULT_STAGES,
        registry: Optional[PatternRegistry] = None,
    ):
        if families is None:
            enabled = set(FAMILIES)
        else:
            enabled = set(families)
            unknown = enabled - set(FAMILIES)
            if unknown:
                raise ValueError(
                    f"Unknown families: {', '.join(sorted(unknown))}. "
                    f"Available: {', '.join(FAMILIES)}"
                )

        self.families = frozenset(enabled)
        self.stages = tuple(s for s in stages if s.family in self.families)
        self.registry = registry if registry is not None else get_registry()

    def detect(self, text: str) -> List[Match]:
        """
        Detect wallet identifiers in text.

        Args:
            text: Input text

        Returns:
            Non-overlapping matches sorted by index
        """
        accepted: List[Match] = []

        for stage in self.stages:
            found = run_stage(text, stage, accepted, self.registry)
            if found:
                logger.debug("Stage %s: %d matches", stage.name, len(found))
            accepted.extend(found)

        accepted.sort(key=lambda m: m.index)
        return accepted


# Global instance
_detector: Optional[WalletDetector] = None
_detector_lock = threading.Lock()


def get_detector() -> WalletDetector:
    """Get global detector instance (all families)."""
    global _detector
    if _detector is None:
        with _detector_lock:
            if _detector is None:
                _detector = WalletDetector()
    return _detector


def find_matches(text: str, families: Optional[Iterable[str]] = None) -> List[Match]:
    """
    Find all wallet identifiers in text.

    Args:
        text: Input text
        families: Families to scan for (eth_tx, btc_tx, sol_tx, eth, btc,
            sol, ens). Default: all of them.

    Returns:
        Matches sorted by index; index is a code point offset into text

    Example:
        >>> find_matches("send to vitalik.eth")
        [Match(value='vitalik.eth', index=8, type='ens')]
    """
    if families is None:
        return get_detector().detect(text)
    return WalletDetector(families=families).detect(text)


def to_byte_offsets(text: str, matches: Iterable[Match], encoding: str = 'utf-8') -> List[Match]:
    """
    Convert match indexes from code points to encoded byte offsets.

    For consumers that splice byte buffers instead of str. Values are
    unchanged, so a match's byte length is len(value.encode(encoding)).
    """
    result = []
    cursor = 0
    byte_pos = 0
    for m in sorted(matches, key=lambda m: m.index):
        byte_pos += len(text[cursor:m.index].encode(encoding))
        cursor = m.index
        result.append(replace(m, index=byte_pos))
    return result
