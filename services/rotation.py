"""Round-robin rotation over provider/key/model combinations.

The catalog is built once per process and never mutated; the only shared
mutable state is the cursor, which every call advances by exactly one.
Consecutive calls therefore start on different combinations, spreading
free-tier quota usage across providers and keys.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Awaitable, Callable, Sequence
from typing import Generic, TypeVar

from models.domain import Combination, ProviderResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RotationCursor:
    """Process-wide counter with an atomic fetch-and-increment."""

    def __init__(self, start: int = 0) -> None:
        self._value = start
        self._lock = threading.Lock()

    def claim(self, modulo: int) -> int:
        """Return the current position modulo ``modulo`` and advance by one."""
        if modulo <= 0:
            raise ValueError("modulo must be positive")
        with self._lock:
            current = self._value
            self._value = (self._value + 1) % modulo
        return current % modulo


def build_combinations(
    providers: Sequence[tuple[str, str, Sequence[str], Sequence[str]]],
) -> list[Combination]:
    """Interleave providers before keys before models.

    ``providers`` is a priority-ordered sequence of
    ``(name, endpoint, keys, models)``.  Models are the outer loop and keys
    the inner one; at every (model, key) position each provider that has
    both contributes one entry, so consecutive entries alternate providers
    whenever possible.
    """
    cleaned = [
        (name, endpoint, [k for k in keys if k and k.strip()], [m for m in models if m])
        for name, endpoint, keys, models in providers
    ]
    max_models = max((len(models) for *_, models in cleaned), default=0)
    max_keys = max((len(keys) for _, _, keys, _ in cleaned), default=0)

    combinations: list[Combination] = []
    for model_index in range(max_models):
        for key_index in range(max_keys):
            for name, endpoint, keys, models in cleaned:
                if key_index < len(keys) and model_index < len(models):
                    combinations.append(
                        Combination(name, endpoint, keys[key_index], models[model_index])
                    )

    logger.info("Built %d provider/key/model combinations for rotation", len(combinations))
    return combinations


class RotationPool(Generic[T]):
    """Tries members in cursor order, wrapping around, until one succeeds."""

    def __init__(
        self,
        members: Sequence[T],
        cursor: RotationCursor | None = None,
        *,
        name: str = "pool",
        label: Callable[[T], str] = str,
    ) -> None:
        self._members = tuple(members)
        self._cursor = cursor or RotationCursor()
        self._name = name
        self._label = label

    def size(self) -> int:
        return len(self._members)

    def claim(self) -> int:
        return self._cursor.claim(len(self._members))

    async def run(self, attempt: Callable[[T], Awaitable[ProviderResult]]) -> ProviderResult:
        """Call ``attempt`` for each member starting at the claimed index.

        Failed results and raised exceptions are logged and the next member
        is tried.  Cancellation is not intercepted and ends the rotation.
        """
        size = self.size()
        if size == 0:
            logger.warning("[%s] No providers configured", self._name)
            return ProviderResult.fail("No providers configured", provider=self._name)

        start = self.claim()
        logger.debug("[%s] Starting rotation at %d/%d", self._name, start, size)
        attempted: list[str] = []

        for offset in range(size):
            member = self._members[(start + offset) % size]
            label = self._label(member)
            attempted.append(label)
            try:
                result = await attempt(member)
            except Exception as exc:
                logger.warning("[%s] %s raised %s: %s", self._name, label, type(exc).__name__, exc)
                continue

            if result.success and result.text and result.text.strip():
                logger.info("[%s] Succeeded via %s", self._name, result.label)
                return result

            logger.warning("[%s] %s failed: %s", self._name, label, result.error or "empty result")

        message = f"All {size} combinations failed. Attempted: {', '.join(attempted)}"
        logger.error("[%s] %s", self._name, message)
        return ProviderResult.fail(message, provider=self._name)
