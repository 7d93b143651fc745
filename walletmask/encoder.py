"""
Encoder - Mask wallet identifiers in text.

The encoder:
1. Detects all wallet identifiers (addresses, tx hashes, ENS names)
2. Creates consistent placeholders for each unique identifier
3. Replaces identifiers using the selected strategy
4. Returns masked text + mapping for later decoding

Supports multiple masking strategies:
- "replace": Substitute with placeholders (ETH_ADDRESS_001) - reversible
- "redact": Remove completely ([ETH_ADDRESS])
- "mask": Wallet-style short form (0x71C7...976F, v******.eth)
- "hash": One-way hash (a1b2c3d4...)
- "encrypt": Fernet tokens, reversible with the key kept in the mapping
"""

import logging
from typing import Iterable, Tuple, Optional, Union, Literal
from pathlib import Path

from .detectors import find_matches
from .mapper import Mapping, category_for
from .strategies import EncryptStrategy, get_strategy

logger = logging.getLogger(__name__)

Strategy = Literal["replace", "redact", "mask", "hash", "encrypt"]


def encode(
    text: str,
    mapping: Optional[Mapping] = None,
    strategy: Strategy = "replace",
    families: Optional[Iterable[str]] = None,
    **kwargs
) -> Tuple[str, Mapping]:
    """
    Mask wallet identifiers in text.

    Args:
        text: Input text
        mapping: Optional existing mapping (for batch processing)
        strategy: Masking strategy to use:
            - "replace": Placeholders like ETH_ADDRESS_001 (default, reversible)
            - "redact": Generic markers like [ENS]
            - "mask": Wallet-style short form like 0x71C7...976F
            - "hash": One-way hash like a1b2c3d4
            - "encrypt": Fernet tokens; the key is stored in the mapping
        families: Identifier families to mask (default: all)
        **kwargs: Strategy-specific options (keep_start, salt, key, ...)

    Returns:
        Tuple of (masked_text, mapping)

    Example:
        >>> masked, mapping = encode("tip jar: vitalik.eth")
        >>> print(masked)
        "tip jar: ENS_001"
    """
    if mapping is None:
        mapping = Mapping()

    # Batches encrypted into one mapping share its key
    if strategy == "encrypt" and mapping.key and "key" not in kwargs:
        kwargs["key"] = mapping.key

    strategy_obj = get_strategy(strategy, **kwargs)

    if isinstance(strategy_obj, EncryptStrategy):
        mapping.key = strategy_obj.key.decode()

    matches = find_matches(text, families=families)
    logger.debug("Masking %d identifiers with strategy %s", len(matches), strategy)

    # Build left-to-right so placeholder numbers follow reading order
    parts = []
    last = 0
    for match in matches:
        category = category_for(match.type)
        placeholder = mapping.get_or_create_placeholder(match.value, category)
        masked = strategy_obj.apply(match.value, category, placeholder).masked

        parts.append(text[last:match.index])
        parts.append(masked)
        last = match.end

    parts.append(text[last:])
    return ''.join(parts), mapping


def encode_file(
    input_path: Union[str, Path],
    strategy: Strategy = "replace",
    families: Optional[Iterable[str]] = None,
    output_path: Optional[Union[str, Path]] = None,
    mapping_path: Optional[Union[str, Path]] = None,
    encoding: str = 'utf-8',
    mapping: Optional[Mapping] = None,
    **kwargs
) -> Tuple[str, Mapping]:
    """
    Encode a file and optionally save results.

    Args:
        input_path: Path to input file
        strategy: Masking strategy
        families: Identifier families to mask (default: all)
        output_path: Path for masked output (optional)
        mapping_path: Path for mapping JSON (optional)
        encoding: File encoding (default utf-8)
        mapping: Existing mapping to extend (optional)
        **kwargs: Strategy-specific options, passed to encode()

    Returns:
        Tuple of (masked_text, mapping)
    """
    with open(input_path, 'r', encoding=encoding) as f:
        text = f.read()

    masked, mapping = encode(text, mapping=mapping, strategy=strategy, families=families, **kwargs)

    if output_path:
        with open(output_path, 'w', encoding=encoding) as f:
            f.write(masked)

    if mapping_path:
        mapping.save(mapping_path)

    return masked, mapping


def get_statistics(mapping: Mapping) -> dict:
    """Get statistics about the encoding."""
    stats = {
        "total_unique_values": len(mapping.entries),
        "total_occurrences": sum(e.occurrences for e in mapping.entries.values()),
        "by_category": {},
    }

    for placeholder, entry in mapping.entries.items():
        category = placeholder.rsplit('_', 1)[0]
        cat_stats = stats["by_category"].setdefault(category, {
            "unique": 0,
            "occurrences": 0,
            "examples": []
        })
        cat_stats["unique"] += 1
        cat_stats["occurrences"] += entry.occurrences
        if len(cat_stats["examples"]) < 3:
            cat_stats["examples"].append(f"{placeholder} → {entry.canonical}")

    return stats
