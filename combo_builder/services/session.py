"""
Wizard Session Registry for Combo Builder
=========================================

This module keeps live combo wizard sessions for the HTTP host. A wizard
session is a presentation adapter wrapping its StepSequencer; the registry maps
an opaque session id to that adapter between requests.

Storage:
--------
Sessions live only in memory. A wizard is short-lived (a customer or cashier
building one combo), and nothing is written anywhere until finish() appends
the composite entry to the cart. Losing the registry on restart loses only
unfinished wizards.

Eviction Strategy:
------------------
1. **TTL-based**: Sessions not accessed within COMBO_SESSION_TTL_SECONDS are
   dropped. Checked probabilistically (~1% of lookups) and on every register.

2. **Oldest-first**: When the registry reaches COMBO_SESSION_MAX, the oldest
   10% of sessions (by last access time) are evicted to make room.

Finished and cancelled sessions are discarded by the routes right away.

Thread Safety:
--------------
All registry operations are protected by a threading.Lock because FastAPI
runs sync endpoints in a thread pool. Eviction helpers expect the caller to
already hold the lock.

Usage:
------
    from combo_builder.services.session import register_session, get_session

    sid = register_session(adapter)
    adapter = get_session(sid)
    if adapter is None:
        raise HTTPException(404, "Combo session not found")
"""

import logging
import random
import threading
import time
import uuid
from typing import Any, Dict, Optional

from .. import config
from ..adapters.base import ComboWizardAdapter


logger = logging.getLogger(__name__)


# =============================================================================
# Session Registry
# =============================================================================
# {session_id: {"adapter": ComboWizardAdapter, "last_access": timestamp}}

WIZARD_SESSIONS: Dict[str, Dict[str, Any]] = {}
_registry_lock = threading.Lock()


# =============================================================================
# Registry Maintenance (caller holds _registry_lock)
# =============================================================================

def _drop_expired_locked(now: float) -> int:
    ttl = config.COMBO_SESSION_TTL_SECONDS
    expired = [
        sid for sid, entry in WIZARD_SESSIONS.items()
        if now - entry["last_access"] > ttl
    ]
    for sid in expired:
        del WIZARD_SESSIONS[sid]
    if expired:
        logger.debug("Dropped %d expired combo sessions", len(expired))
    return len(expired)


def _evict_oldest_locked(count: int) -> None:
    oldest = sorted(WIZARD_SESSIONS.items(), key=lambda x: x[1]["last_access"])
    for sid, _ in oldest[:count]:
        del WIZARD_SESSIONS[sid]
    logger.debug("Evicted %d oldest combo sessions", min(count, len(oldest)))


# =============================================================================
# Public Functions
# =============================================================================

def register_session(adapter: ComboWizardAdapter) -> str:
    """
    Store a freshly opened wizard and return its session id.

    The id is also written to adapter.session_id so rendered views carry it.
    """
    sid = uuid.uuid4().hex
    adapter.session_id = sid
    now = time.time()

    with _registry_lock:
        _drop_expired_locked(now)
        if len(WIZARD_SESSIONS) >= config.COMBO_SESSION_MAX:
            _evict_oldest_locked(max(1, config.COMBO_SESSION_MAX // 10))
        WIZARD_SESSIONS[sid] = {"adapter": adapter, "last_access": now}

    logger.info(
        "Opened %s combo session %s for %s",
        adapter.SURFACE, sid, adapter.sequencer.template.name,
    )
    return sid


def get_session(session_id: str) -> Optional[ComboWizardAdapter]:
    """Look up a live session and refresh its last access time."""
    now = time.time()
    with _registry_lock:
        if random.randint(1, 100) == 1:
            _drop_expired_locked(now)

        entry = WIZARD_SESSIONS.get(session_id)
        if entry is None:
            return None
        if now - entry["last_access"] > config.COMBO_SESSION_TTL_SECONDS:
            del WIZARD_SESSIONS[session_id]
            logger.debug("Combo session %s expired", session_id)
            return None
        entry["last_access"] = now
        return entry["adapter"]


def discard_session(session_id: str) -> bool:
    """Remove a session. Returns False if it was not registered."""
    with _registry_lock:
        return WIZARD_SESSIONS.pop(session_id, None) is not None


def clear_sessions() -> int:
    """
    Remove every session from the registry.

    Useful for testing and maintenance.

    Returns:
        int: Number of sessions that were registered before clearing
    """
    with _registry_lock:
        count = len(WIZARD_SESSIONS)
        WIZARD_SESSIONS.clear()
    logger.info("Cleared %d combo sessions", count)
    return count


def get_registry_stats() -> Dict[str, Any]:
    with _registry_lock:
        return {
            "sessions": len(WIZARD_SESSIONS),
            "max_sessions": config.COMBO_SESSION_MAX,
            "ttl_seconds": config.COMBO_SESSION_TTL_SECONDS,
        }
