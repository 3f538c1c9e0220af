"""Bounded executor for Argon2id derivations.

Every derivation holds a 64 MB working set for the duration of the KDF, so
concurrent callers should go through a small fixed-size pool instead of
calling :func:`passforge.derive` unbounded.  A timeout abandons the result;
the KDF itself runs to completion in its worker thread.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from passforge import DEFAULT_LENGTH, ValidationError, derive

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 2


class DerivationPool:
    """Run :func:`passforge.derive` on at most *max_workers* threads.

    Usable as a context manager::

        with DerivationPool() as pool:
            pwd = pool.derive(master, "example.com", 32, timeout=10)
    """

    def __init__(self, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        if max_workers < 1:
            raise ValidationError("max_workers must be at least 1")
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="passforge-derive",
        )
        logger.debug("Derivation pool started with %d worker(s)", max_workers)

    def submit(self, master: str | bytes, domain: str, length: int = DEFAULT_LENGTH) -> Future:
        """Schedule a derivation and return its :class:`~concurrent.futures.Future`."""
        return self._executor.submit(derive, master, domain, length)

    def derive(
        self,
        master: str | bytes,
        domain: str,
        length: int = DEFAULT_LENGTH,
        timeout: float | None = None,
    ) -> str:
        """Derive through the pool and wait up to *timeout* seconds.

        Raises :class:`concurrent.futures.TimeoutError` when the caller gives
        up waiting; a derivation that has not started yet is cancelled, one
        already running finishes and its result is dropped.  Errors from
        :func:`passforge.derive` propagate unchanged.
        """
        future = self.submit(master, domain, length)
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            if future.cancel():
                logger.debug("Timed out; queued derivation cancelled")
            else:
                logger.debug("Timed out; running derivation will be discarded")
            raise

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "DerivationPool":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()
