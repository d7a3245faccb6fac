"""Debounced persistence of the answer record into the location fragment."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from nfa_form.questionnaire.record import AnswerRecord
from nfa_form.state.token import fragment_for

LOGGER = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.15


class FragmentPersister:
    """Write the current record's fragment on input and change events.

    Input events arrive in bursts while the user types and are coalesced:
    only the last event of a burst writes, ``debounce_seconds`` after it.
    Change events are discrete and write immediately, dropping any pending
    debounced write.
    """

    def __init__(
        self,
        serialize: Callable[[], AnswerRecord],
        write_location: Callable[[str], None],
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self._serialize = serialize
        self._write_location = write_location
        self._debounce_seconds = debounce_seconds
        self._pending: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def on_input(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.flush()
            return
        self._cancel_pending()
        self._pending = loop.call_later(self._debounce_seconds, self._fire)

    def on_change(self) -> None:
        self._cancel_pending()
        self.flush()

    def flush(self) -> str:
        """Persist now and return the fragment written."""
        fragment = fragment_for(self._serialize())
        self._write_location(fragment)
        LOGGER.debug("state_fragment_written")
        return fragment

    def _fire(self) -> None:
        self._pending = None
        self.flush()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
