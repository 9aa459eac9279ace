"""Deferred install prompt store.

The platform offers an "install this app" action once, early, before any
component that wants to show it may exist. The store keeps the most recent
such action until a component consumes it or the install outcome is known.
A permanent dismissal is remembered in key-value storage; a session
dismissal lasts until ``new_session()``.
"""

from typing import Any, Literal, Optional

from ..storage.base import KeyValueStorage, StorageError
from ..utils.logging import get_logger

logger = get_logger("pwa.install_prompt")

DISMISSED_KEY = "pwa-install-dismissed"

Outcome = Literal["accepted", "dismissed"]


class InstallPromptStore:
    """Holds at most one deferred install action."""

    def __init__(self, storage: Optional[KeyValueStorage] = None) -> None:
        self._storage = storage
        self._prompt: Any = None
        self._session_dismissed = False
        self._last_outcome: Optional[Outcome] = None

    @property
    def current(self) -> Any:
        return self._prompt

    @property
    def last_outcome(self) -> Optional[Outcome]:
        return self._last_outcome

    def stash(self, prompt: Any) -> None:
        """Remember ``prompt``, replacing any earlier one."""
        if self._prompt is not None:
            logger.debug("install_prompt_replaced")
        self._prompt = prompt

    def peek(self) -> Any:
        return self._prompt

    def take(self) -> Any:
        """Return the stashed prompt and clear it."""
        prompt, self._prompt = self._prompt, None
        return prompt

    def clear(self) -> None:
        self._prompt = None

    def record_outcome(self, outcome: Outcome) -> None:
        """Clear the prompt once the user has answered it."""
        if outcome not in ("accepted", "dismissed"):
            raise ValueError(f"unknown install outcome: {outcome!r}")
        self._prompt = None
        self._last_outcome = outcome
        logger.info("install_prompt_outcome", outcome=outcome)
        if outcome == "accepted":
            self._write_dismissal("permanent")

    def dismiss(self, permanent: bool = False) -> None:
        if permanent:
            self._write_dismissal("permanent")
        else:
            self._session_dismissed = True

    def new_session(self) -> None:
        self._session_dismissed = False

    @property
    def permanently_dismissed(self) -> bool:
        if self._storage is None:
            return False
        try:
            return self._storage.get_item(DISMISSED_KEY) == "permanent"
        except StorageError as exc:
            logger.error("install_dismissal_read_failed", error=str(exc))
            return False

    def should_offer(self) -> bool:
        return (
            self._prompt is not None
            and not self._session_dismissed
            and not self.permanently_dismissed
        )

    def _write_dismissal(self, value: str) -> None:
        if self._storage is None:
            return
        try:
            self._storage.set_item(DISMISSED_KEY, value)
        except StorageError as exc:
            logger.error("install_dismissal_write_failed", error=str(exc))
