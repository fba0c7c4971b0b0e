"""
Side Effects for the Action Wizard.

Side effects are things the host application does on the wizard's
behalf after a state change: show a toast, play the completion
celebration, warn about a rejected input, refresh a cached list. The
wizard never performs them itself; it only emits them.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class SideEffectType(Enum):
    """Types of side effects the host can execute."""

    # One-time completion animation when "done" is first reached
    CELEBRATE = "celebrate"

    # Toasts
    NOTIFY = "notify"
    WARN = "warn"
    ERROR = "error"

    # Host cache refresh after a successful create
    INVALIDATE = "invalidate"

    # Custom/Raw side effects
    CUSTOM = "custom"


@dataclass
class SideEffect:
    """A side effect to be executed by the host.

    Attributes:
        effect_type: The type of side effect
        payload: Data required to execute the effect
        id: Unique identifier for this effect
        created_at: When the effect was created
        priority: Execution priority (lower = earlier)
    """

    effect_type: SideEffectType
    payload: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    priority: int = 0  # Lower = execute first

    def __post_init__(self) -> None:
        if isinstance(self.effect_type, str):
            try:
                self.effect_type = SideEffectType(self.effect_type)
            except ValueError:
                self.effect_type = SideEffectType.CUSTOM

    @classmethod
    def celebrate(cls, action_id: str, session_id: str) -> SideEffect:
        return cls(
            effect_type=SideEffectType.CELEBRATE,
            payload={"action_id": action_id, "session_id": session_id},
        )

    @classmethod
    def notify(cls, title: str, message: str) -> SideEffect:
        """Create a success/info toast."""
        return cls(effect_type=SideEffectType.NOTIFY, payload={"title": title, "message": message})

    @classmethod
    def warn(cls, title: str, message: str, code: str | None = None) -> SideEffect:
        """Create a warning toast (input rejected, partial failure)."""
        payload: dict[str, Any] = {"title": title, "message": message}
        if code is not None:
            payload["code"] = code
        return cls(effect_type=SideEffectType.WARN, payload=payload)

    @classmethod
    def error(cls, title: str, error: dict[str, Any]) -> SideEffect:
        """Create an error toast from a build_error_response() dict."""
        return cls(effect_type=SideEffectType.ERROR, payload={"title": title, **error})

    @classmethod
    def invalidate(cls, resource: str, priority: int = 10) -> SideEffect:
        """Ask the host to refresh its cached copy of a resource list."""
        return cls(effect_type=SideEffectType.INVALIDATE, payload={"resource": resource}, priority=priority)

    @classmethod
    def custom(cls, effect_name: str, payload: dict[str, Any], priority: int = 0) -> SideEffect:
        return cls(
            effect_type=SideEffectType.CUSTOM,
            payload={"effect_name": effect_name, **payload},
            priority=priority,
        )


@dataclass
class SideEffectBatch:
    """Side effects collected during one session, waiting for the host."""

    effects: list[SideEffect] = field(default_factory=list)
    session_id: str | None = None
    source_action: str | None = None

    def add(self, effect: SideEffect) -> None:
        self.effects.append(effect)

    def add_notify(self, title: str, message: str) -> None:
        self.effects.append(SideEffect.notify(title, message))

    def add_warn(self, title: str, message: str, code: str | None = None) -> None:
        self.effects.append(SideEffect.warn(title, message, code))

    def of_type(self, effect_type: SideEffectType) -> list[SideEffect]:
        return [effect for effect in self.effects if effect.effect_type is effect_type]

    def sort_by_priority(self) -> None:
        """Sort effects by priority (lower = first). Stable for equal priorities."""
        self.effects.sort(key=lambda e: e.priority)

    def drain(self) -> list[SideEffect]:
        """Return all pending effects in priority order and empty the batch."""
        self.sort_by_priority()
        drained, self.effects = self.effects, []
        return drained

    def is_empty(self) -> bool:
        return len(self.effects) == 0

    def __len__(self) -> int:
        return len(self.effects)


class SideEffectExecutor:
    """Interface for executing side effects.

    Implemented by the host application (toast display, animation,
    cache invalidation).
    """

    async def execute(self, effect: SideEffect) -> bool:
        """Execute a single side effect.

        Returns:
            True if execution was successful
        """
        raise NotImplementedError

    async def execute_batch(self, batch: SideEffectBatch) -> list[bool]:
        """Execute and clear a batch of side effects.

        Returns:
            List of success flags for each effect
        """
        results = []
        for effect in batch.drain():
            success = await self.execute(effect)
            results.append(success)
        return results
