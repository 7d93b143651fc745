"""
Tests for the pattern registry.
"""

import re
import sys
import threading
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from walletmask.detectors import patterns
from walletmask.detectors.patterns import (
    Match,
    PatternError,
    PatternRegistry,
    PATTERN_DEFINITIONS,
    get_pattern,
    get_registry,
)


ALL_TYPES = [
    'fullAddress', 'truncated', 'eth_tx_hash', 'eth_tx_truncated',
    'btc_tx_hash', 'btc_tx_truncated', 'btc_legacy', 'btc_bech32',
    'btc_truncated_legacy', 'btc_truncated_bech32', 'sol', 'sol_truncated',
    'sol_tx_sig', 'sol_tx_truncated', 'ens',
]


def _full(name, text):
    """Return the whole-string match for a pattern, or None."""
    m = get_pattern(name).search(text)
    return m.group() if m else None


def test_registry_has_every_type():
    """Every identifier type has exactly one compiled pattern."""
    registry = PatternRegistry()
    assert registry.names() == ALL_TYPES
    assert len(registry) == len(PATTERN_DEFINITIONS)
    for name in ALL_TYPES:
        assert name in registry
        assert isinstance(registry.get_pattern(name), re.Pattern)


def test_get_pattern_is_idempotent():
    registry = get_registry()
    assert get_registry() is registry
    assert get_pattern('ens') is registry.get_pattern('ens')


def test_unknown_pattern_raises_key_error():
    with pytest.raises(KeyError):
        get_registry().get_pattern('doge')


def test_spec_metadata():
    registry = get_registry()
    spec = registry.get_spec('btc_truncated_bech32')
    assert spec.name == 'btc_truncated_bech32'
    assert spec.form == 'truncated'
    assert spec.kind == 'address'
    assert registry.get_spec('sol_tx_sig').kind == 'transaction'
    assert registry.get_spec('ens').kind == 'name'


def test_invalid_literal_fails_construction():
    """A broken pattern aborts the whole registry, naming the type."""
    definitions = PATTERN_DEFINITIONS + [('broken', r'0x[a-f', 0, 'full', 'address')]
    with pytest.raises(PatternError) as exc_info:
        PatternRegistry(definitions)
    assert exc_info.value.name == 'broken'
    assert 'broken' in str(exc_info.value)


def test_concurrent_first_access_compiles_once(monkeypatch):
    """Threads racing on first access all get the same registry."""
    monkeypatch.setattr(patterns, '_registry', None)
    results = []

    def worker():
        results.append(get_registry())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 8
    assert all(r is results[0] for r in results)


# =============================================================================
# PATTERN SHAPES
# =============================================================================

def test_full_address_shape():
    addr = '0x71C7656EC7ab88b098defB751B7401B5f6d8976F'
    assert _full('fullAddress', f'to {addr}.') == addr
    # 41 hex digits is not an address
    assert _full('fullAddress', addr + 'a') is None
    assert _full('fullAddress', addr[:-1]) is None


def test_truncated_accepts_both_ellipses():
    assert _full('truncated', '0x71C7...976F') == '0x71C7...976F'
    assert _full('truncated', '0x71C7…976F') == '0x71C7…976F'
    # Two dots is not an ellipsis
    assert _full('truncated', '0x71C7..976F') is None
    # Head too short
    assert _full('truncated', '0x71C...976F') is None


def test_btc_tx_hash_requires_bare_hex():
    tx = 'f4184fc596403b9d638783cf57adfe4c75c605f6356fbc91338530e9831e9e16'
    assert _full('btc_tx_hash', tx) == tx
    assert _full('btc_tx_hash', '0x' + tx) is None


def test_btc_legacy_excludes_ambiguous_chars():
    assert _full('btc_legacy', '1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa') is not None
    assert _full('btc_legacy', '1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfN0') is None
    assert _full('btc_legacy', '2A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa') is None


def test_btc_bech32_length_bounds():
    assert _full('btc_bech32', 'bc1qar0srrr7xfkvy5l643lydnw9re59gtzzwf5mdq') is not None
    assert _full('btc_bech32', 'bc1' + 'q' * 38) is None
    assert _full('btc_bech32', 'bc1' + 'q' * 59) is not None
    assert _full('btc_bech32', 'bc1' + 'q' * 60) is None


def test_truncated_bounds_are_per_type():
    """Solana address truncation allows 3 chars; signatures need 4."""
    assert _full('sol_truncated', 'EPj...t1v') == 'EPj...t1v'
    assert _full('sol_tx_truncated', 'EPj...t1v') is None
    assert _full('sol_tx_truncated', 'EPjF...Dt1v') == 'EPjF...Dt1v'
    assert _full('btc_truncated_legacy', '3J9...NLy') == '3J9...NLy'


def test_sol_signature_length():
    sig = ('5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnbJLgp8uirBgmQpj'
           'KhoR4tjF3ZpRzrFmBV6UjKdiSZkQUW')
    assert len(sig) == 88
    assert _full('sol_tx_sig', sig) == sig
    assert _full('sol_tx_sig', sig[:85]) is None


def test_ens_case_insensitive_and_bounded():
    assert _full('ens', 'gm vitalik.eth!') == 'vitalik.eth'
    assert _full('ens', 'VITALIK.ETH') == 'VITALIK.ETH'
    assert _full('ens', 'my-wallet.eth') == 'my-wallet.eth'
    assert _full('ens', 'see foo.ethereum') is None


def test_match_end_and_dict():
    m = Match(value='vitalik.eth', index=3, type='ens')
    assert m.end == 14
    assert m.to_dict() == {'value': 'vitalik.eth', 'index': 3, 'type': 'ens'}


def test_match_is_immutable():
    m = Match(value='a.eth', index=0, type='ens')
    with pytest.raises(AttributeError):
        m.index = 5


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
