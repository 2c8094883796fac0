"""In-place redraw of a streamed changelog."""

import shutil
import sys
from typing import Callable, Iterable

from changelog_gen.llm.tokens import estimate_cost
from changelog_gen.output import (
    CLEAR_DOWN, CLEAR_LINE, RESTORE_CURSOR, RULE, SAVE_CURSOR,
    cursor_up, dim, info,
)
from changelog_gen.output.rows import count_rows


def terminal_width() -> int:
    return shutil.get_terminal_size((80, 24)).columns


class ChangelogRenderer:
    """Redraws separator, cost line and the accumulated changelog on every delta.

    The spinner owns the cursor until the first event arrives; the renderer
    stops it (joining its thread) before writing anything.
    """

    def __init__(self, model: str, prompt_tokens: int, spinner=None, stream=None,
                 width: Callable[[], int] | None = None):
        self.model = model
        self.prompt_tokens = prompt_tokens
        self.response_tokens = 0
        self.buffer = ''
        self.lines_to_move_up = 0
        self.started = False
        self.spinner = spinner
        self.stream = stream if stream is not None else sys.stdout
        self._width = width or terminal_width

    @property
    def width(self) -> int:
        return max(1, self._width())

    @property
    def cost(self) -> float:
        return estimate_cost(self.prompt_tokens, self.response_tokens, self.model)

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def _release_spinner(self) -> None:
        if self.spinner is not None:
            self.spinner.stop()

    def cost_line(self) -> str:
        total = self.prompt_tokens + self.response_tokens
        return (f"{self.model}: {self.prompt_tokens} prompt + {self.response_tokens} completion"
                f" = {total} tokens (${self.cost:.4f})")

    def block(self, width: int | None = None) -> str:
        """The plain text written for the current state."""
        rule = RULE * (width or self.width)
        return f"{rule}\n{self.cost_line()}\n{self.buffer}\n"

    def _styled_block(self, width: int) -> str:
        rule = dim(RULE * width)
        return f"{rule}\n{info(self.cost_line())}\n{self.buffer}\n"

    def update(self, delta: str | None) -> None:
        """Handle one stream event. None means the event carried no usable text."""
        if not self.started:
            self._release_spinner()
            self._write(CLEAR_LINE + '\n\n')
            self.started = True

        if delta is None:
            return

        self.buffer += delta
        self.response_tokens += 1

        width = self.width
        self._write(
            cursor_up(self.lines_to_move_up) + CLEAR_DOWN
            + self._styled_block(width)
            + SAVE_CURSOR
        )
        # The write leaves the cursor below the block; its open last row is
        # where the cursor sits, so it isn't climbed.
        self.lines_to_move_up = count_rows(self.block(width), width) - 1

    def finish(self) -> None:
        """Put the cursor after the last redraw and close with a separator."""
        self._release_spinner()
        if self.response_tokens:
            self._write(RESTORE_CURSOR)
        if self.started:
            self._write(dim(RULE * self.width) + '\n')

    def consume(self, deltas: Iterable[str | None]) -> str:
        """Render every delta until the stream ends; return the changelog text."""
        try:
            for delta in deltas:
                self.update(delta)
        finally:
            self._release_spinner()
        self.finish()
        return self.buffer
