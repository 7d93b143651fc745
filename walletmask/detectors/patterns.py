"""
Pattern definitions for wallet identifiers.

Every identifier type (addresses, truncated addresses, transaction hashes,
ENS names) has exactly one regex. Patterns are compiled once per process
and shared by every scan.

Detection is purely lexical: no checksum validation is done here.
"""

import logging
import re
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Match:
    """A detected wallet identifier."""
    value: str          # The exact text found
    index: int          # Start position in the scanned text
    type: str           # fullAddress, btc_legacy, ens, etc.

    @property
    def end(self) -> int:
        return self.index + len(self.value)

    def to_dict(self) -> dict:
        return {"value": self.value, "index": self.index, "type": self.type}


@dataclass(frozen=True)
class PatternSpec:
    """A compiled matcher for one identifier type."""
    name: str               # Type tag reported on matches
    regex: "re.Pattern"
    form: str               # full or truncated
    kind: str               # address, transaction or name


class PatternError(ValueError):
    """Raised when a pattern literal fails to compile."""

    def __init__(self, name: str, error: re.error):
        super().__init__(f"Invalid pattern for {name!r}: {error}")
        self.name = name
        self.error = error


# =============================================================================
# CHARACTER CLASSES
# =============================================================================

HEX = r'[a-fA-F0-9]'

# Base58 excludes: 0, O, I, l
BASE58 = r'[1-9A-HJ-NP-Za-km-z]'

BECH32 = r'[a-zA-HJ-NP-Z0-9]'

# "..." or the single-character horizontal ellipsis
ELLIPSIS = r'(?:\.{3}|…)'


def _truncated(prefix: str, charset: str, low: int, high: int) -> str:
    """Build a `prefix` + head + ellipsis + tail pattern."""
    part = f'{charset}{{{low},{high}}}'
    return rf'\b{prefix}{part}{ELLIPSIS}{part}\b'


# =============================================================================
# PATTERN TABLE
# =============================================================================

# (type, regex, flags, form, kind)
PATTERN_DEFINITIONS: List[Tuple[str, str, int, str, str]] = [
    # === ETHEREUM ===
    # 0x71C7656EC7ab88b098defB751B7401B5f6d8976F
    ('fullAddress', rf'\b0x{HEX}{{40}}\b', 0, 'full', 'address'),
    # 0x71C7...976F
    ('truncated', _truncated('0x', HEX, 4, 12), 0, 'truncated', 'address'),
    ('eth_tx_hash', rf'\b0x{HEX}{{64}}\b', 0, 'full', 'transaction'),
    ('eth_tx_truncated', _truncated('0x', HEX, 4, 12), 0, 'truncated', 'transaction'),

    # === BITCOIN ===
    # Transaction ids are bare hex, no 0x prefix
    ('btc_tx_hash', rf'\b{HEX}{{64}}\b', 0, 'full', 'transaction'),
    ('btc_tx_truncated', _truncated('', HEX, 4, 12), 0, 'truncated', 'transaction'),
    # 1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa, 3J98t1WpEZ73CNmQviecrnyiWrnqRhWNLy
    ('btc_legacy', rf'\b[13]{BASE58}{{25,34}}\b', 0, 'full', 'address'),
    # bc1qar0srrr7xfkvy5l643lydnw9re59gtzzwf5mdq
    ('btc_bech32', rf'\bbc1{BECH32}{{39,59}}\b', 0, 'full', 'address'),
    ('btc_truncated_legacy', _truncated('[13]', BASE58, 2, 20), 0, 'truncated', 'address'),
    ('btc_truncated_bech32', _truncated('bc1', BECH32, 2, 40), 0, 'truncated', 'address'),

    # === SOLANA ===
    ('sol', rf'\b{BASE58}{{32,44}}\b', 0, 'full', 'address'),
    ('sol_truncated', _truncated('', BASE58, 3, 10), 0, 'truncated', 'address'),
    ('sol_tx_sig', rf'\b{BASE58}{{86,88}}\b', 0, 'full', 'transaction'),
    ('sol_tx_truncated', _truncated('', BASE58, 4, 12), 0, 'truncated', 'transaction'),

    # === ENS ===
    # vitalik.eth, my-wallet.eth
    ('ens', r'\b[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.eth\b', re.IGNORECASE, 'full', 'name'),
]


class PatternRegistry:
    """
    Compiled patterns, keyed by type tag.

    All patterns are compiled up front, so a broken literal fails
    construction instead of a later scan.

    Usage:
        registry = PatternRegistry()
        regex = registry.get_pattern('fullAddress')
    """

    def __init__(self, definitions: Optional[List[Tuple[str, str, int, str, str]]] = None):
        if definitions is None:
            definitions = PATTERN_DEFINITIONS

        self._specs: Dict[str, PatternSpec] = {}
        for name, pattern, flags, form, kind in definitions:
            try:
                regex = re.compile(pattern, flags)
            except re.error as e:
                raise PatternError(name, e) from e
            self._specs[name] = PatternSpec(name=name, regex=regex, form=form, kind=kind)

        logger.debug("Compiled %d wallet patterns", len(self._specs))

    def get_pattern(self, name: str) -> "re.Pattern":
        """Get the compiled regex for a type tag."""
        return self._specs[name].regex

    def get_spec(self, name: str) -> PatternSpec:
        return self._specs[name]

    def names(self) -> List[str]:
        return list(self._specs)

    def __contains__(self, name: str) -> bool:
        return name in self._specs

    def __len__(self) -> int:
        return len(self._specs)


# Global instance
_registry: Optional[PatternRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> PatternRegistry:
    """Get global pattern registry (compiled on first use)."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = PatternRegistry()
    return _registry


def get_pattern(name: str) -> "re.Pattern":
    """Get a compiled regex from the global registry."""
    return get_registry().get_pattern(name)
