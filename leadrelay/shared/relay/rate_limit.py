"""Per-session submission rate limiting."""

import math

from leadrelay.shared.relay.errors import RateLimited
from leadrelay.shared.session.store import SessionStore


def check_rate_limit(store: SessionStore, session_id: str, now: float, window_seconds: int) -> None:
    """
    Reject the request if this session had a lead accepted less than
    window_seconds ago.

    The check and the later record_submission call are separate store
    operations, so two simultaneous requests from one session can both pass.

    Raises:
        RateLimited with the remaining wait rounded up to whole seconds
    """
    last_submission = store.get_last_submission(session_id) or 0
    elapsed = now - last_submission
    if elapsed < window_seconds:
        retry_after = max(math.ceil(window_seconds - elapsed), 1)
        raise RateLimited(retry_after=retry_after, window=window_seconds)


def record_submission(store: SessionStore, session_id: str, now: float) -> None:
    store.record_submission(session_id, now)
