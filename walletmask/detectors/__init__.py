"""
Wallet identifier detectors.

Detection runs as a fixed pipeline of pattern stages:
1. Transaction hashes (ETH, BTC, SOL), full before truncated
2. Addresses (ETH, BTC, SOL), full before truncated
3. ENS names

Earlier stages win: a later stage never claims an overlapping span.
"""

from .patterns import (
    Match,
    PatternSpec,
    PatternError,
    PatternRegistry,
    PATTERN_DEFINITIONS,
    get_registry,
    get_pattern,
)
from .scanner import overlaps, scan
from .families import (
    Stage,
    DEFAULT_STAGES,
    FAMILIES,
    run_stage,
    is_valid_ens,
    detect_eth_tx_hashes,
    detect_eth_tx_truncated,
    detect_btc_tx_hashes,
    detect_sol_tx_signatures,
    detect_eth_addresses,
    detect_eth_truncated,
    detect_btc_addresses,
    detect_sol_addresses,
    detect_ens_names,
)
from .pipeline import (
    WalletDetector,
    get_detector,
    find_matches,
    to_byte_offsets,
)


__all__ = [
    # Results
    "Match",
    # Pattern registry
    "PatternSpec",
    "PatternError",
    "PatternRegistry",
    "PATTERN_DEFINITIONS",
    "get_registry",
    "get_pattern",
    # Scanning
    "overlaps",
    "scan",
    # Families
    "Stage",
    "DEFAULT_STAGES",
    "FAMILIES",
    "run_stage",
    "is_valid_ens",
    "detect_eth_tx_hashes",
    "detect_eth_tx_truncated",
    "detect_btc_tx_hashes",
    "detect_sol_tx_signatures",
    "detect_eth_addresses",
    "detect_eth_truncated",
    "detect_btc_addresses",
    "detect_sol_addresses",
    "detect_ens_names",
    # Orchestrator
    "WalletDetector",
    "get_detector",
    "find_matches",
    "to_byte_offsets",
]
