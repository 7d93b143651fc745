"""
Mapping between wallet identifiers and placeholders.

Handles:
- Generating consistent placeholders (same identifier → same placeholder)
- Normalizing hex identifiers and ENS names, which are case-insensitive
- Serializing/deserializing mapping to JSON, including the encryption
  key when the "encrypt" strategy was used
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Set, Union
from pathlib import Path


# Map match types to placeholder categories
TYPE_CATEGORIES = {
    'fullAddress': 'ETH_ADDRESS',
    'truncated': 'ETH_ADDRESS',
    'eth_tx_hash': 'ETH_TX',
    'eth_tx_truncated': 'ETH_TX',
    'btc_legacy': 'BTC_ADDRESS',
    'btc_bech32': 'BTC_ADDRESS',
    'btc_truncated_legacy': 'BTC_ADDRESS',
    'btc_truncated_bech32': 'BTC_ADDRESS',
    'btc_tx_hash': 'BTC_TX',
    'btc_tx_truncated': 'BTC_TX',
    'sol': 'SOL_ADDRESS',
    'sol_truncated': 'SOL_ADDRESS',
    'sol_tx_sig': 'SOL_TX',
    'sol_tx_truncated': 'SOL_TX',
    'ens': 'ENS',
}

# WALLET covers types registered outside the default pattern table
CATEGORIES = tuple(dict.fromkeys(TYPE_CATEGORIES.values())) + ('WALLET',)

# Hex and ENS values compare case-insensitively; base58 is case-sensitive
_CASE_INSENSITIVE = {'ETH_ADDRESS', 'ETH_TX', 'BTC_TX', 'ENS'}


def category_for(match_type: str) -> str:
    """Get the placeholder category for a match type."""
    return TYPE_CATEGORIES.get(match_type, 'WALLET')


def normalize(value: str, category: str) -> str:
    """Lookup key under which spelling variants of one identifier collide."""
    value = value.strip().replace('…', '...')
    if category in _CASE_INSENSITIVE:
        value = value.lower()
    return f"{category}|{value}"


@dataclass
class MappingEntry:
    """A single mapping from placeholder to original value(s)."""
    placeholder: str
    canonical: str  # First form seen
    variations: Set[str] = field(default_factory=set)  # All forms seen
    occurrences: int = 0


class Mapping:
    """
    Bidirectional mapping between identifiers and placeholders.

    "0xAbC...", "0xabc..." map to the same placeholder; two Solana
    addresses that differ only by case do not.
    """

    def __init__(self):
        self.entries: Dict[str, MappingEntry] = {}  # placeholder → entry
        self._value_to_placeholder: Dict[str, str] = {}  # normalized_value → placeholder
        self._counters: Dict[str, int] = {}  # category → count
        self.created = datetime.now().isoformat()
        self.version = "1.0"
        self.key: Optional[str] = None  # Fernet key when encoded with "encrypt"

    def get_or_create_placeholder(self, value: str, category: str) -> str:
        """
        Get existing placeholder for value, or create new one.

        Values are normalized before lookup.
        """
        normalized = normalize(value, category)

        if normalized in self._value_to_placeholder:
            placeholder = self._value_to_placeholder[normalized]
            entry = self.entries[placeholder]
            entry.variations.add(value)
            entry.occurrences += 1
            return placeholder

        self._counters[category] = self._counters.get(category, 0) + 1
        placeholder = f"{category}_{self._counters[category]:03d}"

        self.entries[placeholder] = MappingEntry(
            placeholder=placeholder,
            canonical=value,
            variations={value},
            occurrences=1
        )
        self._value_to_placeholder[normalized] = placeholder

        return placeholder

    def get_original(self, placeholder: str) -> Optional[str]:
        """Get original (canonical) value for a placeholder."""
        entry = self.entries.get(placeholder)
        return entry.canonical if entry else None

    def to_dict(self) -> dict:
        """Convert mapping to dictionary for JSON serialization."""
        data = {
            "version": self.version,
            "created": self.created,
            "statistics": dict(self._counters),
            "mappings": {
                placeholder: {
                    "canonical": entry.canonical,
                    "variations": sorted(entry.variations),
                    "occurrences": entry.occurrences
                }
                for placeholder, entry in self.entries.items()
            }
        }
        if self.key:
            data["encryption_key"] = self.key
        return data

    def save(self, path: Union[str, Path]) -> None:
        """Save mapping to JSON file."""
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'Mapping':
        """Load mapping from JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        mapping = cls()
        mapping.version = data.get("version", "1.0")
        mapping.created = data.get("created", "")
        mapping.key = data.get("encryption_key")

        for placeholder, entry_data in data.get("mappings", {}).items():
            entry = MappingEntry(
                placeholder=placeholder,
                canonical=entry_data["canonical"],
                variations=set(entry_data.get("variations", [entry_data["canonical"]])),
                occurrences=entry_data.get("occurrences", 1)
            )
            mapping.entries[placeholder] = entry

            category, num = placeholder.rsplit('_', 1)
            for variation in entry.variations | {entry.canonical}:
                normalized = normalize(variation, category)
                mapping._value_to_placeholder[normalized] = placeholder

            mapping._counters[category] = max(
                mapping._counters.get(category, 0), int(num)
            )

        return mapping

    def __repr__(self) -> str:
        total = sum(self._counters.values())
        return f"Mapping({total} entries: {dict(self._counters)})"
