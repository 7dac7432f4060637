"""Per-invocation lock state machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional

from redislockrun.core.models import LockState


_TRANSITIONS: Dict[LockState, FrozenSet[LockState]] = {
    LockState.IDLE: frozenset({LockState.ATTEMPTING}),
    LockState.ATTEMPTING: frozenset({LockState.ACQUIRED, LockState.CONTENDED}),
    LockState.CONTENDED: frozenset({LockState.ACQUIRED, LockState.DENIED}),
    LockState.ACQUIRED: frozenset({LockState.RUNNING}),
    LockState.RUNNING: frozenset({LockState.RELEASED, LockState.NOT_OWNED, LockState.CRASH_RELEASED}),
    LockState.DENIED: frozenset(),
    LockState.RELEASED: frozenset(),
    LockState.NOT_OWNED: frozenset(),
    LockState.CRASH_RELEASED: frozenset(),
}


@dataclass
class LockLifecycle:
    """Tracks where one invocation is in the acquire/run/release protocol."""

    state: LockState = LockState.IDLE
    history: List[LockState] = field(default_factory=list)
    # expiry of the live lock that denied us, when known
    held_until: Optional[int] = None

    def advance(self, target: LockState) -> LockState:
        if target not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal lock transition {self.state.value} -> {target.value}")
        self.history.append(self.state)
        self.state = target
        return self.state

    @property
    def may_execute(self) -> bool:
        return self.state in {LockState.ACQUIRED, LockState.RUNNING}
