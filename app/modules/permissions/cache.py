"""Thread-safe in-process cache of (plan, role, action) permission decisions."""
import threading
import logging
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)

Generation = Tuple[int, int]


class PermissionCache:
    """
    Memoizes the final boolean decision for a (plan_id, role_id, action_slug) triple.

    Entries never expire. Correctness relies on every permission-matrix write calling
    one of the invalidate_* methods before it reports success, so invalidation errs on
    the side of dropping too much: a stale True grants access silently.

    Each invalidation also bumps a generation: per plan for invalidate_plan, global
    for the role/action/clear entry points. A reader takes generation(plan_id) before
    querying the matrix and stores its answer with set_if_current, which drops the
    write if any invalidation touching that plan happened in between.

    Keys are "plan_id:role_id:action_slug". Plan and role ids are uuids; the slug is
    the remainder of the key and may itself contain ":".
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[str, bool] = {}
        self._plan_generations: Dict[str, int] = {}
        self._epoch = 0
        self._hits = 0
        self._misses = 0

    @staticmethod
    def make_key(plan_id: str, role_id: str, action_slug: str) -> str:
        return f"{plan_id}:{role_id}:{action_slug}"

    @staticmethod
    def _split_key(key: str):
        plan_id, role_id, action_slug = key.split(":", 2)
        return plan_id, role_id, action_slug

    def get(self, key: str) -> Optional[bool]:
        with self._lock:
            value = self._entries.get(key)
            if value is None:
                self._misses += 1
            else:
                self._hits += 1
            return value

    def set(self, key: str, value: bool) -> None:
        with self._lock:
            self._entries[key] = bool(value)

    def generation(self, plan_id: str) -> Generation:
        """Snapshot to pass to set_if_current once the decision has been computed"""
        with self._lock:
            return self._epoch, self._plan_generations.get(plan_id, 0)

    def set_if_current(self, key: str, value: bool, generation: Generation) -> bool:
        """Store value only if no invalidation covering the key's plan ran since `generation`"""
        plan_id = self._split_key(key)[0]
        with self._lock:
            if (self._epoch, self._plan_generations.get(plan_id, 0)) != generation:
                logger.debug(f"Discarded stale decision for {key}")
                return False
            self._entries[key] = bool(value)
            return True

    def _drop(self, segment: int, value: str) -> int:
        with self._lock:
            if segment == 0:
                self._plan_generations[value] = self._plan_generations.get(value, 0) + 1
            else:
                self._epoch += 1
            stale = [k for k in self._entries if self._split_key(k)[segment] == value]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def invalidate_plan(self, plan_id: str) -> int:
        """Drop every decision made under plan_id. Returns the number of dropped entries."""
        dropped = self._drop(0, plan_id)
        logger.debug(f"Invalidated {dropped} cached decisions for plan {plan_id}")
        return dropped

    def invalidate_role(self, role_id: str) -> int:
        dropped = self._drop(1, role_id)
        logger.debug(f"Invalidated {dropped} cached decisions for role {role_id}")
        return dropped

    def invalidate_action(self, action_slug: str) -> int:
        dropped = self._drop(2, action_slug)
        logger.debug(f"Invalidated {dropped} cached decisions for action {action_slug}")
        return dropped

    def clear(self) -> None:
        with self._lock:
            self._epoch += 1
            self._entries.clear()

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"hits": self._hits, "misses": self._misses, "size": len(self._entries)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
