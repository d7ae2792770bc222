"""The picker event loop.

:class:`Picker` ties a :class:`~ppick.terminal.Terminal` to a
:class:`~ppick.session.PickerSession`: it blocks for one input, turns it
into a key event, applies it, and repaints, until the session confirms or
quits.  Frames identical to the previous one are not written again.
"""

from __future__ import annotations

import logging
from typing import Sequence

from ppick.config import PickerConfig
from ppick.keybindings import PickerKeybindingsManager
from ppick.render import Frame, build_frame, paint
from ppick.session import QUIT, KeyEvent, Outcome, PickerSession
from ppick.terminal import SignalEvent, Terminal

logger = logging.getLogger(__name__)


def viewport_height_for(terminal: Terminal) -> int:
    """Rows left for matches once the query line is drawn."""
    return max(1, terminal.rows - 1)


class Picker:
    """Main loop controller: input decoding, session updates and painting."""

    def __init__(
        self,
        terminal: Terminal,
        items: Sequence[str],
        config: PickerConfig | None = None,
        keybindings: PickerKeybindingsManager | None = None,
    ) -> None:
        self.terminal = terminal
        config = (config or PickerConfig()).with_viewport_height(
            viewport_height_for(terminal)
        )
        self.session = PickerSession(items, config)
        self._keybindings = keybindings or PickerKeybindingsManager()

        # Previous render state
        self._previous_frame: Frame | None = None
        self._previous_width: int = 0

        # Metrics
        self._paint_count: int = 0

    @property
    def paint_count(self) -> int:
        return self._paint_count

    def run(self) -> Outcome:
        """Paint, then process input until the session finishes.

        If the terminal stops producing input the session counts as quit.
        """
        self.render()
        for data in self.terminal.events():
            event = self._to_event(data)
            if event is None:
                continue
            if event.kind == "resize":
                self.session.set_viewport_height(viewport_height_for(self.terminal))
                self._previous_frame = None

            outcome = self.session.handle(event)
            if outcome is not None:
                logger.debug("Session finished: %s", outcome.kind)
                return outcome
            self.render()
        return QUIT

    def render(self) -> None:
        width = self.terminal.columns
        frame = build_frame(self.session, width)
        if frame == self._previous_frame and width == self._previous_width:
            return
        self.terminal.write(paint(frame, width))
        self._previous_frame = frame
        self._previous_width = width
        self._paint_count += 1

    def _to_event(self, data: str | SignalEvent) -> KeyEvent | None:
        if isinstance(data, SignalEvent):
            return KeyEvent(data.name)
        return self._keybindings.decode(data)


def pick(
    terminal: Terminal,
    items: Sequence[str],
    config: PickerConfig | None = None,
    keybindings: PickerKeybindingsManager | None = None,
) -> Outcome:
    """Run a picker on an already started *terminal*."""
    return Picker(terminal, items, config, keybindings).run()
