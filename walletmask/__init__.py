"""
WalletMask - Find and mask crypto wallet identifiers in text.

Detects Ethereum, Bitcoin and Solana addresses and transaction hashes
(full or truncated like 0x71C7...976F) and ENS names.

Usage:
    from walletmask import find_matches, encode, decode

    matches = find_matches(text)
    masked, mapping = encode(text)
    original = decode(masked, mapping)
"""

__version__ = "0.1.0"

from .detectors import Match, WalletDetector, find_matches, to_byte_offsets
from .encoder import encode, encode_file, get_statistics
from .decoder import decode, decode_file
from .mapper import Mapping

__all__ = [
    "__version__",
    "Match",
    "WalletDetector",
    "find_matches",
    "to_byte_offsets",
    "encode",
    "encode_file",
    "get_statistics",
    "decode",
    "decode_file",
    "Mapping",
]
