"""
Decoder - Restore original identifiers.

The decoder:
1. Decrypts Fernet tokens when the mapping carries an encryption key
2. Finds all placeholders in text (ETH_ADDRESS_001, ENS_002, etc.)
3. Looks up original values in the mapping
4. Replaces placeholders with original values
"""

import re
from typing import List, Optional, Tuple, Union
from pathlib import Path

from .mapper import CATEGORIES, Mapping
from .strategies import EncryptStrategy


# Pattern to match placeholders: CATEGORY_NNN (3 or more digits)
# Longer categories first so ETH_ADDRESS wins over a shorter prefix
PLACEHOLDER_PATTERN = re.compile(
    r'\b(' + '|'.join(sorted(CATEGORIES, key=len, reverse=True)) + r')_(\d{3,})\b'
)


def decode(text: str, mapping: Mapping) -> str:
    """
    Decode placeholders and encrypted tokens back to original identifiers.

    Args:
        text: Text containing placeholders or tokens
        mapping: The mapping used during encoding

    Returns:
        Text with placeholders replaced by original values

    Example:
        >>> decode("send to ENS_001", mapping)
        "send to vitalik.eth"
    """
    if mapping.key:
        text = EncryptStrategy(key=mapping.key).decrypt_text(text)

    def replace_placeholder(match):
        placeholder = match.group(0)
        original = mapping.get_original(placeholder)
        return original if original else placeholder

    return PLACEHOLDER_PATTERN.sub(replace_placeholder, text)


def decode_file(
    input_path: Union[str, Path],
    mapping_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    encoding: str = 'utf-8'
) -> str:
    """
    Decode a file using a mapping.

    Args:
        input_path: Path to file with placeholders
        mapping_path: Path to mapping JSON file
        output_path: Path for decoded output (optional)
        encoding: File encoding (default utf-8)

    Returns:
        Decoded text
    """
    mapping = Mapping.load(mapping_path)

    with open(input_path, 'r', encoding=encoding) as f:
        text = f.read()

    decoded = decode(text, mapping)

    if output_path:
        with open(output_path, 'w', encoding=encoding) as f:
            f.write(decoded)

    return decoded


def find_placeholders(text: str) -> List[Tuple[str, str]]:
    """Find all placeholders in text as (category, number) pairs."""
    return PLACEHOLDER_PATTERN.findall(text)
