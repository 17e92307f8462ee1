# tests/unit/infra/test_redis_blacklist_store.py
"""
Unit tests for RedisTokenBlacklistStore using fakeredis.

They cover:
- add with and without expiry
- expired tokens are not stored
- remove / clear / stats
- fail-open behaviour when Redis errors
"""

from __future__ import annotations

import time

import fakeredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from staff_records.infra.redis.redis_blacklist_store import RedisTokenBlacklistStore


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def store(fake_redis):
    return RedisTokenBlacklistStore(r=fake_redis)


class _DownRedis:
    """Stand-in client whose every call fails like a lost connection."""

    def __getattr__(self, name):
        def _fail(*args, **kwargs):
            raise RedisConnectionError("connection refused")

        return _fail


def test_add_sets_ttl_from_expiry(store, fake_redis):
    store.add("tok", expires_at=time.time() + 120)

    assert store.is_blacklisted("tok")
    key = store._k("tok")
    assert 0 < fake_redis.ttl(key) <= 120


def test_sub_second_remaining_lifetime_is_still_stored(store, fake_redis):
    store.add("tok", expires_at=time.time() + 0.5)

    assert store.is_blacklisted("tok")
    assert 0 < fake_redis.pttl(store._k("tok")) <= 1000


def test_ttl_is_rounded_up_to_outlive_the_token(store, fake_redis):
    store.add("tok", expires_at=time.time() + 120.4)

    assert fake_redis.pttl(store._k("tok")) > 120_400


def test_add_without_expiry_keeps_entry(store, fake_redis):
    store.add("tok")

    assert store.is_blacklisted("tok")
    assert fake_redis.ttl(store._k("tok")) == -1
    assert store.stats().total_blacklisted == 1
    assert store.stats().with_expiration == 0


def test_already_expired_token_is_not_stored(store):
    store.add("tok", expires_at=time.time() - 5)
    assert store.is_blacklisted("tok") is False


def test_raw_token_is_never_used_as_key(store, fake_redis):
    store.add("secret.jwt.value")
    keys = [k.decode() for k in fake_redis.keys("*")]

    assert keys == [store._k("secret.jwt.value")]
    assert "secret.jwt.value" not in keys[0]


def test_remove_and_clear(store):
    store.add("a")
    store.add("b", expires_at=time.time() + 60)

    store.remove("a")
    assert store.is_blacklisted("a") is False
    assert store.stats().total_blacklisted == 1

    store.clear()
    assert store.stats().total_blacklisted == 0


def test_sweep_is_a_noop(store):
    store.add("a", expires_at=time.time() + 60)
    assert store.sweep() == 0
    assert store.is_blacklisted("a")


def test_redis_failures_fail_open():
    store = RedisTokenBlacklistStore(r=_DownRedis())

    store.add("tok", expires_at=time.time() + 60)
    store.remove("tok")
    store.clear()
    assert store.is_blacklisted("tok") is False
    assert store.stats().total_blacklisted == 0
