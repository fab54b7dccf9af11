from types import SimpleNamespace

import pytest

from dendrite.relays import SEED_RELAYS, RelayPool, normalize_url


def relay_list(*tags, kind=10002):
    return SimpleNamespace(kind=kind, tags=[list(t) for t in tags])


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  wss://relay.damus.io/  ", "wss://relay.damus.io"),
        ("ws://nos.lol", "ws://nos.lol"),
        ("https://nos.lol", ""),
        ("", ""),
        ("wss://LOCALHOST:7777", ""),
        ("ws://127.0.0.1:4869", ""),
    ],
)
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


def test_seeds_are_normalized_and_deduplicated():
    pool = RelayPool(["wss://nos.lol/", "wss://nos.lol", "http://bad", "ws://localhost"])
    assert pool.urls() == ["wss://nos.lol"]
    assert pool.size() == 1


def test_default_seeds():
    pool = RelayPool()
    assert pool.size() == len(SEED_RELAYS)
    assert set(pool.urls()) == set(SEED_RELAYS)


def test_ingest_skips_read_only():
    pool = RelayPool([])
    pool.ingest(
        relay_list(
            ("r", "wss://a.example.com"),
            ("r", "wss://b.example.com", "write"),
            ("r", "wss://c.example.com", "read"),
            ("p", "wss://d.example.com"),
            ("r",),
        )
    )
    assert sorted(pool.urls()) == ["wss://a.example.com", "wss://b.example.com"]


def test_ingest_ignores_other_kinds():
    pool = RelayPool([])
    pool.ingest(relay_list(("r", "wss://a.example.com"), kind=1))
    assert pool.urls() == []


def test_ingest_accepts_mapping_events():
    pool = RelayPool([])
    pool.ingest({"kind": 10002, "tags": [["r", "wss://a.example.com/"]]})
    assert pool.urls() == ["wss://a.example.com"]


def test_ingest_respects_cap():
    pool = RelayPool(["wss://seed.example.com"], max_relays=2)
    pool.ingest(
        relay_list(
            ("r", "wss://a.example.com"),
            ("r", "wss://b.example.com"),
            ("r", "wss://c.example.com"),
        )
    )
    assert pool.size() == pool.max_relays
    assert pool.urls() == ["wss://seed.example.com", "wss://a.example.com"]


def test_invalid_max_uses_default():
    pool = RelayPool([], max_relays=0)
    assert pool.max_relays == 1000
    assert len(pool) == 0