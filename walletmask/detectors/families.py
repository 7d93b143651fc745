"""
Family detectors for wallet identifiers.

Each stage scans a fixed list of pattern types in order. Full forms come
before truncated forms inside a family, because a truncated pattern would
otherwise match inside (or next to) a full identifier.

Stages run in DEFAULT_STAGES order: transaction hashes first, then
addresses, then ENS names. Longer and more specific shapes claim their
spans before looser shapes get a chance.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .patterns import Match, PatternRegistry, get_registry
from .scanner import scan


def is_valid_ens(candidate: str) -> bool:
    """Filter ENS-like strings that are too short to be real names."""
    if not candidate.endswith('.eth'):
        return False
    if len(candidate) <= 7:
        return len(candidate) > 4
    return True


@dataclass(frozen=True)
class Stage:
    """One step of the scan pipeline."""
    name: str
    family: str                 # Key used to enable/disable the stage
    types: Tuple[str, ...]      # Pattern types, scanned in this order
    validator: Optional[Callable[[str], bool]] = None


# =============================================================================
# STAGE TABLE (order is precedence)
# =============================================================================

ETH_TX_HASH = Stage('eth_tx_hash', 'eth_tx', ('eth_tx_hash',))
ETH_TX_TRUNCATED = Stage('eth_tx_truncated', 'eth_tx', ('eth_tx_truncated',))
BTC_TX = Stage('btc_tx', 'btc_tx', ('btc_tx_hash', 'btc_tx_truncated'))
SOL_TX = Stage('sol_tx', 'sol_tx', ('sol_tx_sig', 'sol_tx_truncated'))
ETH_ADDRESS = Stage('eth_address', 'eth', ('fullAddress',))
ETH_TRUNCATED = Stage('eth_truncated', 'eth', ('truncated',))
BTC_ADDRESS = Stage('btc_address', 'btc', (
    'btc_legacy',
    'btc_bech32',
    'btc_truncated_legacy',
    'btc_truncated_bech32',
))
SOL_ADDRESS = Stage('sol_address', 'sol', ('sol', 'sol_truncated'))
ENS = Stage('ens', 'ens', ('ens',), validator=is_valid_ens)

DEFAULT_STAGES: Tuple[Stage, ...] = (
    ETH_TX_HASH,
    ETH_TX_TRUNCATED,
    BTC_TX,
    SOL_TX,
    ETH_ADDRESS,
    ETH_TRUNCATED,
    BTC_ADDRESS,
    SOL_ADDRESS,
    ENS,
)

FAMILIES: Tuple[str, ...] = ('eth_tx', 'btc_tx', 'sol_tx', 'eth', 'btc', 'sol', 'ens')


def run_stage(
    text: str,
    stage: Stage,
    existing: Sequence[Match] = (),
    registry: Optional[PatternRegistry] = None,
) -> List[Match]:
    """
    Run one stage against text.

    Every sub-pattern rejects hits that overlap `existing` or anything an
    earlier sub-pattern of the same stage already found.

    Returns:
        Only the matches this stage added
    """
    if registry is None:
        registry = get_registry()

    found: List[Match] = []
    for type_tag in stage.types:
        found.extend(scan(
            text,
            registry.get_pattern(type_tag),
            type_tag,
            reject_lists=(existing, found),
            validator=stage.validator,
        ))
    return found


# =============================================================================
# TRANSACTION DETECTORS
# =============================================================================

def detect_eth_tx_hashes(text: str, existing: Sequence[Match] = (),
                         registry: Optional[PatternRegistry] = None) -> List[Match]:
    """Detect full Ethereum transaction hashes (0x + 64 hex)."""
    return run_stage(text, ETH_TX_HASH, existing, registry)


def detect_eth_tx_truncated(text: str, existing: Sequence[Match] = (),
                            registry: Optional[PatternRegistry] = None) -> List[Match]:
    """Detect shortened Ethereum transaction hashes (0xabcd...ef01)."""
    return run_stage(text, ETH_TX_TRUNCATED, existing, registry)


def detect_btc_tx_hashes(text: str, existing: Sequence[Match] = (),
                         registry: Optional[PatternRegistry] = None) -> List[Match]:
    """Detect Bitcoin transaction ids, full then truncated."""
    return run_stage(text, BTC_TX, existing, registry)


def detect_sol_tx_signatures(text: str, existing: Sequence[Match] = (),
                             registry: Optional[PatternRegistry] = None) -> List[Match]:
    """Detect Solana transaction signatures, full then truncated."""
    return run_stage(text, SOL_TX, existing, registry)


# =============================================================================
# ADDRESS DETECTORS
# =============================================================================

def detect_eth_addresses(text: str, existing: Sequence[Match] = (),
                         registry: Optional[PatternRegistry] = None) -> List[Match]:
    """Detect full Ethereum addresses (0x + 40 hex)."""
    return run_stage(text, ETH_ADDRESS, existing, registry)


def detect_eth_truncated(text: str, existing: Sequence[Match] = (),
                         registry: Optional[PatternRegistry] = None) -> List[Match]:
    return run_stage(text, ETH_TRUNCATED, existing, registry)


def detect_btc_addresses(text: str, existing: Sequence[Match] = (),
                         registry: Optional[PatternRegistry] = None) -> List[Match]:
    """
    Detect Bitcoin addresses.

    Order: legacy, bech32, truncated legacy, truncated bech32.
    """
    return run_stage(text, BTC_ADDRESS, existing, registry)


def detect_sol_addresses(text: str, existing: Sequence[Match] = (),
                         registry: Optional[PatternRegistry] = None) -> List[Match]:
    """Detect Solana addresses, full then truncated."""
    return run_stage(text, SOL_ADDRESS, existing, registry)


def detect_ens_names(text: str, existing: Sequence[Match] = (),
                     registry: Optional[PatternRegistry] = None) -> List[Match]:
    """Detect ENS names (vitalik.eth), dropping implausibly short ones."""
    return run_stage(text, ENS, existing, registry)
