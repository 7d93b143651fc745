"""
Tests for the scan orchestrator.

Covers precedence between families, ordering and disjointness of the
result, and family configuration.
"""

import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from walletmask import find_matches, to_byte_offsets, WalletDetector
from walletmask.detectors import get_detector, pipeline


ETH_ADDRESS = '0x71C7656EC7ab88b098defB751B7401B5f6d8976F'
ETH_TX = '0x5c504ed432cb51138bcf09aa5e8a410dd4a1e204ef84bfed1be16dfba1b22060'
BTC_TX = 'f4184fc596403b9d638783cf57adfe4c75c605f6356fbc91338530e9831e9e16'
BTC_LEGACY = '1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa'
BTC_BECH32 = 'bc1qar0srrr7xfkvy5l643lydnw9re59gtzzwf5mdq'
SOL_ADDRESS = 'EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v'
SOL_SIG = ('5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnbJLgp8uirBgmQpj'
           'KhoR4tjF3ZpRzrFmBV6UjKdiSZkQUW')

# A chat log mixing every family
SAMPLE_TEXT = f"""
Hey, please send the 0.5 ETH to {ETH_ADDRESS} (or just vitalik.eth).
The transfer went through: {ETH_TX}
Old wallet 0x71C7...976F is retired.

BTC: {BTC_LEGACY} or segwit {BTC_BECH32}
First ever tx: {BTC_TX}

SOL mint {SOL_ADDRESS}, swap sig {SOL_SIG}
Short forms: EPj…t1v and 3J9...NLy
"""


def _assert_consistent(text, matches):
    """Matches are sorted, disjoint, and point at their value."""
    for m in matches:
        assert text[m.index:m.end] == m.value
    for a, b in zip(matches, matches[1:]):
        assert a.index < b.index
        assert a.end <= b.index


def test_empty_text():
    assert find_matches('') == []


def test_no_identifiers():
    assert find_matches('hello world') == []
    assert find_matches('The quick brown fox jumps over the lazy dog.') == []


def test_eth_tx_hash_wins_over_address():
    """A 64-hex hash is one eth_tx_hash, not an address plus leftovers."""
    text = f'tx {ETH_TX}'
    matches = find_matches(text)

    assert len(matches) == 1
    assert matches[0].type == 'eth_tx_hash'
    assert matches[0].index == 3
    assert len(matches[0].value) == 66


def test_full_address_adjacent_to_truncated_shape():
    """The full form claims its span; no truncated match overlaps it."""
    text = f'{ETH_ADDRESS}...976F'
    matches = find_matches(text)

    assert [m.type for m in matches] == ['fullAddress']
    assert matches[0].value == ETH_ADDRESS


def test_truncated_hex_goes_to_transaction_family():
    """Transaction stages run first and claim ambiguous truncated hex."""
    assert [m.type for m in find_matches('0x71C7...976F')] == ['eth_tx_truncated']
    assert [m.type for m in find_matches('abcd...ef12')] == ['btc_tx_truncated']


def test_family_configuration_changes_claims():
    """Without transaction families the same text is an address."""
    assert [m.type for m in find_matches('0x71C7...976F', families=['eth'])] == ['truncated']
    assert [m.type for m in find_matches('abcd...ef12', families=['sol'])] == ['sol_truncated']


def test_mixed_text_three_matches():
    text = f'Send to {ETH_ADDRESS} or {BTC_LEGACY}, or just vitalik.eth today.'
    matches = find_matches(text)

    assert [m.type for m in matches] == ['fullAddress', 'btc_legacy', 'ens']
    assert [m.value for m in matches] == [ETH_ADDRESS, BTC_LEGACY, 'vitalik.eth']
    assert matches[0].index == text.index(ETH_ADDRESS)
    assert matches[1].index == text.index(BTC_LEGACY)
    assert matches[2].index == text.index('vitalik.eth')


def test_sample_text_all_families():
    matches = find_matches(SAMPLE_TEXT)
    _assert_consistent(SAMPLE_TEXT, matches)

    by_value = {m.value: m.type for m in matches}
    assert by_value == {
        ETH_ADDRESS: 'fullAddress',
        'vitalik.eth': 'ens',
        ETH_TX: 'eth_tx_hash',
        '0x71C7...976F': 'eth_tx_truncated',
        BTC_LEGACY: 'btc_legacy',
        BTC_BECH32: 'btc_bech32',
        BTC_TX: 'btc_tx_hash',
        SOL_ADDRESS: 'sol',
        SOL_SIG: 'sol_tx_sig',
        'EPj…t1v': 'sol_truncated',
        '3J9...NLy': 'btc_truncated_legacy',
    }


def test_deterministic():
    assert find_matches(SAMPLE_TEXT) == find_matches(SAMPLE_TEXT)


def test_word_boundaries():
    """Identifiers embedded in longer tokens are ignored."""
    assert find_matches(ETH_ADDRESS + 'a') == []
    assert find_matches('wallet' + BTC_LEGACY) == []
    assert find_matches('foo.ethereum') == []


def test_short_ens_names():
    assert [m.value for m in find_matches('gm a.eth')] == ['a.eth']
    assert [m.value for m in find_matches('gm ab.eth')] == ['ab.eth']


def test_unicode_offsets_are_code_points():
    text = '💰 → vitalik.eth'
    matches = find_matches(text)
    assert matches[0].index == 4
    assert text[matches[0].index:matches[0].end] == 'vitalik.eth'


def test_byte_offsets():
    text = f'é {ETH_ADDRESS} ü vitalik.eth'
    matches = find_matches(text)
    converted = to_byte_offsets(text, matches)

    encoded = text.encode('utf-8')
    for m in converted:
        value = m.value.encode('utf-8')
        assert encoded[m.index:m.index + len(value)] == value
    assert [m.index for m in converted] == [3, 49]


def test_unknown_family_rejected():
    with pytest.raises(ValueError, match='doge'):
        WalletDetector(families=['eth', 'doge'])


def test_detector_skips_disabled_stages():
    detector = WalletDetector(families=['ens'])
    assert [s.name for s in detector.stages] == ['ens']
    assert [m.type for m in detector.detect(SAMPLE_TEXT)] == ['ens']


def test_global_detector_reused():
    assert get_detector() is get_detector()


def test_global_detector_built_once_across_threads(monkeypatch):
    monkeypatch.setattr(pipeline, '_detector', None)

    with ThreadPoolExecutor(max_workers=8) as pool:
        detectors = list(pool.map(lambda _: get_detector(), range(32)))

    assert all(d is detectors[0] for d in detectors)


def test_degenerate_input():
    """Odd input never raises."""
    for text in ['...', '…' * 50, '0x', '.eth', '\x00\n\t', 'a' * 10000]:
        assert isinstance(find_matches(text), list)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
