from __future__ import annotations

import logging
import threading
import time

from offerflow.application.use_cases.offer_session import OfferSession
from offerflow.application.use_cases.open_offer import OpenOfferUseCase


class OfferSessionRegistry:
    """
    Open sessions keyed by offer id.

    A session idle for longer than `idle_seconds` is loaded again from the store, so catalog
    changes made in the backend show up on the next request. Past `max_sessions` the least
    recently used sessions are dropped; a session with a confirmation in flight is never
    dropped or reloaded.
    """

    def __init__(self, open_offer: OpenOfferUseCase, idle_seconds: float = 1800.0, max_sessions: int = 1000) -> None:
        self._open_offer = open_offer
        self._idle_seconds = idle_seconds
        self._max_sessions = max_sessions
        self._sessions: dict[str, tuple[OfferSession, float]] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def __len__(self) -> int:
        return len(self._sessions)

    def get_or_open(self, offer_id: str, now_ts: float | None = None) -> OfferSession:
        now = time.time() if now_ts is None else now_ts
        with self._lock:
            entry = self._sessions.get(offer_id)
            if entry is not None:
                session, last_used = entry
                if session.responding or now - last_used <= self._idle_seconds:
                    self._sessions[offer_id] = (session, now)
                    return session
                self._logger.info("Reloading idle offer session", extra={"offer_id": offer_id})

            session = self._open_offer.execute(offer_id)
            self._sessions[offer_id] = (session, now)
            self._evict_least_recently_used(keep=offer_id)
            return session

    def close(self, offer_id: str) -> None:
        """Forget the session; the next request loads the offer from the store."""
        with self._lock:
            self._sessions.pop(offer_id, None)

    def _evict_least_recently_used(self, keep: str) -> None:
        while len(self._sessions) > self._max_sessions:
            candidates = [
                (last_used, offer_id)
                for offer_id, (session, last_used) in self._sessions.items()
                if offer_id != keep and not session.responding
            ]
            if not candidates:
                return
            _, oldest = min(candidates)
            del self._sessions[oldest]
            self._logger.info("Evicted offer session", extra={"offer_id": oldest})
