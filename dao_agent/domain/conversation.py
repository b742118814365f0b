"""Client-side conversation state container.

Every transition builds a new immutable ``ConversationState`` and hands it to
the subscribers in the order the transitions were applied. Nested transitions
triggered from inside a subscriber are queued behind the one being delivered.
A subscriber that raises is logged and skipped; the transition still applies.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Deque, List, Optional, Tuple
from uuid import uuid4

from dao_agent.infrastructure.logging.logger import logger

from .models import DomainContext, Role


@dataclass(frozen=True)
class Message:
    id: str
    role: Role
    content: str
    created_at: datetime
    loading: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class ConversationState:
    """Snapshot of one conversation.

    ``generation`` is bumped whenever existing messages are discarded
    (``clear_messages``/``reset``); a caller that captured an older value
    must not apply a late response.
    """

    messages: Tuple[Message, ...] = ()
    is_panel_open: bool = False
    is_loading: bool = False
    context: Optional[DomainContext] = None
    generation: int = 0


Subscriber = Callable[[ConversationState], None]

_UNSET = object()


class ConversationStore:
    def __init__(self, initial: Optional[ConversationState] = None):
        self._state = initial or ConversationState()
        self._subscribers: List[Subscriber] = []
        self._pending: Deque[ConversationState] = deque()
        self._flushing = False

    @property
    def state(self) -> ConversationState:
        return self._state

    @property
    def generation(self) -> int:
        return self._state.generation

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register an observer; it is called at once with the current state.

        Returns a function that removes the observer.
        """

        self._subscribers.append(callback)
        callback(self._state)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # ---- panel ----

    def open(self) -> None:
        self._set(replace(self._state, is_panel_open=True))

    def close(self) -> None:
        self._set(replace(self._state, is_panel_open=False))

    def toggle(self) -> None:
        self._set(replace(self._state, is_panel_open=not self._state.is_panel_open))

    # ---- context / loading ----

    def set_context(self, context: Optional[DomainContext]) -> None:
        self._set(replace(self._state, context=context))

    def set_loading(self, is_loading: bool) -> None:
        self._set(replace(self._state, is_loading=bool(is_loading)))

    # ---- messages ----

    def add_message(
        self,
        role: Role,
        content: str,
        *,
        loading: bool = False,
        error: Optional[str] = None,
    ) -> Message:
        message = Message(
            id=uuid4().hex,
            role=role,
            content=content,
            created_at=datetime.now(timezone.utc),
            loading=loading,
            error=error,
        )
        self._set(replace(self._state, messages=self._state.messages + (message,)))
        return message

    def update_last_message(self, *, content=_UNSET, loading=_UNSET, error=_UNSET) -> None:
        """Merge fields into the most recent message; no-op on an empty conversation."""

        if not self._state.messages:
            return
        changes = {}
        if content is not _UNSET:
            changes["content"] = content
        if loading is not _UNSET:
            changes["loading"] = bool(loading)
        if error is not _UNSET:
            changes["error"] = error
        last = replace(self._state.messages[-1], **changes)
        self._set(replace(self._state, messages=self._state.messages[:-1] + (last,)))

    def clear_messages(self) -> None:
        self._set(
            replace(
                self._state,
                messages=(),
                generation=self._next_generation(),
            )
        )

    def reset(self) -> None:
        self._set(ConversationState(generation=self._next_generation()))

    def _next_generation(self) -> int:
        if self._state.messages:
            return self._state.generation + 1
        return self._state.generation

    def _set(self, new_state: ConversationState) -> None:
        self._state = new_state
        self._pending.append(new_state)
        if self._flushing:
            return
        self._flushing = True
        try:
            while self._pending:
                snapshot = self._pending.popleft()
                for callback in list(self._subscribers):
                    self._notify(callback, snapshot)
        finally:
            self._flushing = False

    @staticmethod
    def _notify(callback: Subscriber, snapshot: ConversationState) -> None:
        # a failing observer must not block the others or the transition
        try:
            callback(snapshot)
        except Exception:
            logger.exception("store.subscriber_failed")
