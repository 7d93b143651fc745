"""
Masking strategies for wallet identifiers.

Every strategy turns one detected identifier into the text that replaces it:
- replace: The mapping's placeholder (ETH_ADDRESS_001), reversible
- redact: A category marker ([ENS])
- mask: The short form a wallet UI shows (0x71C7...976F)
- hash: Stable pseudonym, case variants of hex/ENS hash alike
- encrypt: Fernet token, reversible with the key stored in the mapping
"""

import hashlib
import re
from abc import ABC, abstractmethod
from typing import Optional, Tuple, Union
from dataclasses import dataclass

from .mapper import normalize


ELLIPSES = ('...', '…')

# Fernet tokens are urlsafe base64 starting with version byte 0x80
FERNET_TOKEN_PATTERN = re.compile(r'(?<![A-Za-z0-9_-])gAAAAA[A-Za-z0-9_-]+={0,2}')


def split_prefix(value: str) -> Tuple[str, str]:
    """Split off the 0x / bc1 prefix that identifies the chain."""
    lower = value.lower()
    if lower.startswith("0x"):
        return value[:2], value[2:]
    if lower.startswith("bc1"):
        return value[:3], value[3:]
    return "", value


@dataclass
class MaskedValue:
    """Replacement chosen for one identifier."""
    original: str
    masked: str
    category: str
    strategy: str


class MaskingStrategy(ABC):
    """Base class for masking strategies."""

    name: str = "base"
    reversible: bool = False

    @abstractmethod
    def apply(self, value: str, category: str, placeholder: str) -> MaskedValue:
        """Mask one identifier; placeholder is its entry in the mapping."""

    def _result(self, value: str, masked: str, category: str) -> MaskedValue:
        return MaskedValue(original=value, masked=masked, category=category, strategy=self.name)


class ReplaceStrategy(MaskingStrategy):
    """
    Replace with the mapping's placeholder.

    Example: "0x71C7656EC7ab88b098defB751B7401B5f6d8976F" → "ETH_ADDRESS_001"
    """

    name = "replace"
    reversible = True

    def apply(self, value: str, category: str, placeholder: str) -> MaskedValue:
        return self._result(value, placeholder, category)


class RedactStrategy(MaskingStrategy):
    """
    Redact with a marker: "[ENS]", or a fixed marker when
    include_category is False.
    """

    name = "redact"

    def __init__(self, marker: str = "[WALLET]", include_category: bool = True):
        self.marker = marker
        self.include_category = include_category

    def apply(self, value: str, category: str, placeholder: str) -> MaskedValue:
        masked = f"[{category}]" if self.include_category else self.marker
        return self._result(value, masked, category)


class MaskStrategy(MaskingStrategy):
    """
    Shorten to the form wallets display.

    Examples:
    - "0x71C7656EC7ab88b098defB751B7401B5f6d8976F" → "0x71C7...976F"
    - "bc1qar0srrr7xfkvy5l643lydnw9re59gtzzwf5mdq" → "bc1qar0...5mdq"
    - "vitalik.eth" → "v******.eth"

    Prefixes (0x, bc1) and the .eth suffix are never masked. Values that
    are already truncated, or too short to shorten, are masked entirely.

    Options:
    - mask_char: Character for fully masked parts (default: "*")
    - keep_start: Characters to keep after the prefix (default: 4)
    - keep_end: Characters to keep at the end (default: 4)
    - ellipsis: Joiner between kept parts (default: "...")
    """

    name = "mask"

    def __init__(self, mask_char: str = "*", keep_start: int = 4, keep_end: int = 4,
                 ellipsis: str = "..."):
        self.mask_char = mask_char
        self.keep_start = keep_start
        self.keep_end = keep_end
        self.ellipsis = ellipsis

    def apply(self, value: str, category: str, placeholder: str) -> MaskedValue:
        if category == "ENS":
            masked = self._mask_ens(value)
        else:
            head, body = split_prefix(value)
            masked = head + self._shorten(body)
        return self._result(value, masked, category)

    def _shorten(self, body: str) -> str:
        if any(e in body for e in ELLIPSES) or len(body) <= self.keep_start + self.keep_end:
            return self.mask_char * len(body)

        end = body[-self.keep_end:] if self.keep_end > 0 else ""
        return body[:self.keep_start] + self.ellipsis + end

    def _mask_ens(self, name: str) -> str:
        label, dot, tld = name.rpartition(".")
        if not dot:
            return self.mask_char * len(name)
        if len(label) <= 1:
            return self.mask_char * len(label) + dot + tld
        return label[0] + self.mask_char * (len(label) - 1) + dot + tld


class HashStrategy(MaskingStrategy):
    """
    One-way pseudonym: chain prefix + truncated digest.

    The digest covers the normalized value, so "0xAbC..." and "0xabc..."
    get the same pseudonym while base58 values stay case-sensitive.

    Options:
    - algorithm: Any hashlib algorithm (default: "sha256")
    - truncate: Keep N hex characters (default: 16, 0 keeps all)
    - salt: Optional salt
    """

    name = "hash"

    def __init__(self, algorithm: str = "sha256", truncate: int = 16, salt: Optional[str] = None):
        if algorithm not in hashlib.algorithms_available:
            raise ValueError(f"Unknown hash algorithm: {algorithm}")
        self.algorithm = algorithm
        self.truncate = truncate
        self.salt = salt or ""

    def apply(self, value: str, category: str, placeholder: str) -> MaskedValue:
        digest = hashlib.new(
            self.algorithm, (self.salt + normalize(value, category)).encode()
        ).hexdigest()
        if self.truncate:
            digest = digest[:self.truncate]

        head, _ = split_prefix(value)
        return self._result(value, head + digest, category)


class EncryptStrategy(MaskingStrategy):
    """
    Fernet encryption (AES-128-CBC + HMAC).

    Example: "vitalik.eth" → "gAAAAABh..."

    The encoder records the key in the mapping so decode() can restore
    the originals.

    Options:
    - key: Fernet key (generated if not provided)
    """

    name = "encrypt"
    reversible = True

    def __init__(self, key: Union[str, bytes, None] = None):
        try:
            from cryptography.fernet import Fernet
        except ImportError:
            raise ImportError(
                "cryptography not installed. Run: pip install cryptography"
            )

        if key is None:
            key = Fernet.generate_key()
        self.key = key.encode() if isinstance(key, str) else key
        self._fernet = Fernet(self.key)

    def apply(self, value: str, category: str, placeholder: str) -> MaskedValue:
        token = self._fernet.encrypt(value.encode()).decode()
        return self._result(value, token, category)

    def decrypt(self, token: str) -> Optional[str]:
        """Decrypt a token, or None if it was not made with this key."""
        from cryptography.fernet import InvalidToken

        try:
            return self._fernet.decrypt(token.encode()).decode()
        except InvalidToken:
            return None

    def decrypt_text(self, text: str) -> str:
        """Replace every token made with this key by its plaintext."""
        def replace_token(match):
            plain = self.decrypt(match.group(0))
            return plain if plain is not None else match.group(0)

        return FERNET_TOKEN_PATTERN.sub(replace_token, text)


STRATEGIES = {
    "replace": ReplaceStrategy,
    "redact": RedactStrategy,
    "mask": MaskStrategy,
    "hash": HashStrategy,
    "encrypt": EncryptStrategy,
}


def get_strategy(name: str, **kwargs) -> MaskingStrategy:
    """
    Get a masking strategy by name.

    Args:
        name: Strategy name (replace, redact, mask, hash, encrypt)
        **kwargs: Strategy-specific options

    Returns:
        MaskingStrategy instance
    """
    if name not in STRATEGIES:
        raise ValueError(
            f"Unknown strategy: {name}. "
            f"Available: {', '.join(STRATEGIES)}"
        )
    return STRATEGIES[name](**kwargs)
