"""Tests for the bounded derivation pool."""

import concurrent.futures
import threading
import time
from unittest.mock import patch

import pytest

from passforge import ValidationError, derive
from passforge.pool import DerivationPool

MASTER = "correct horse battery staple"


def test_matches_direct_derivation():
    with DerivationPool() as pool:
        assert pool.derive(MASTER, "example.com", 16) == derive(MASTER, "example.com", 16)


def test_errors_propagate():
    with DerivationPool() as pool:
        with pytest.raises(ValidationError):
            pool.derive(MASTER, "example.com", 15)


def test_rejects_empty_pool():
    with pytest.raises(ValidationError):
        DerivationPool(max_workers=0)


def test_bounds_concurrent_derivations():
    lock = threading.Lock()
    active = 0
    peak = 0

    def slow_derive(master, domain, length):
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.05)
        with lock:
            active -= 1
        return domain

    with patch("passforge.pool.derive", side_effect=slow_derive):
        with DerivationPool(max_workers=2) as pool:
            futures = [pool.submit(MASTER, f"site{i}.com", 16) for i in range(6)]
            results = [f.result() for f in futures]

    assert results == [f"site{i}.com" for i in range(6)]
    assert peak <= 2


def test_timeout_abandons_result():
    release = threading.Event()

    def blocked_derive(master, domain, length):
        release.wait(5)
        return "late"

    with patch("passforge.pool.derive", side_effect=blocked_derive):
        pool = DerivationPool(max_workers=1)
        try:
            with pytest.raises(concurrent.futures.TimeoutError):
                pool.derive(MASTER, "example.com", 16, timeout=0.05)
        finally:
            release.set()
            pool.shutdown()


def test_timeout_cancels_queued_derivation():
    release = threading.Event()
    started = []

    def recording_derive(master, domain, length):
        started.append(domain)
        if domain == "first.com":
            release.wait(5)
        return domain

    with patch("passforge.pool.derive", side_effect=recording_derive):
        pool = DerivationPool(max_workers=1)
        try:
            first = pool.submit(MASTER, "first.com", 16)
            with pytest.raises(concurrent.futures.TimeoutError):
                pool.derive(MASTER, "abandoned.com", 16, timeout=0.05)
        finally:
            release.set()
            pool.shutdown()

    assert first.result() == "first.com"
    assert started == ["first.com"]
