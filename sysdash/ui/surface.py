"""
Character-grid render surfaces.

CellGrid is an in-memory grid addressed by (column, row) with a glyph and
optional foreground/background color per cell. Writes outside the grid are
dropped, so an undersized terminal clips instead of failing.
TerminalSurface pushes the grid to the terminal through rich's Live display
and polls stdin for a quit key without blocking.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Protocol

from rich.console import Console
from rich.live import Live
from rich.style import Style
from rich.text import Text

from sysdash.exceptions import SurfaceInitializationError

# Cross-platform keyboard input
if sys.platform == "win32":
    import msvcrt
else:
    import select
    import termios
    import tty

logger = logging.getLogger(__name__)

QUIT_KEYS = frozenset({"q", "Q", "\x03"})


class RenderSurface(Protocol):
    """Drawing target used by the renderer and the refresh loop."""

    width: int
    height: int

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def clear(self) -> None: ...

    def put_string(
        self, column: int, row: int, text: str, fg: str | None = None, bg: str | None = None
    ) -> None: ...

    def refresh(self) -> None: ...

    def poll_quit(self) -> bool: ...


@dataclass
class Cell:
    char: str = " "
    fg: str | None = None
    bg: str | None = None


class CellGrid:
    """In-memory character grid; also the base of the terminal surface."""

    def __init__(self, width: int, height: int, background: str | None = None):
        self.background = background
        self.width = 0
        self.height = 0
        self._cells: list[list[Cell]] = []
        self.resize(width, height)

    def resize(self, width: int, height: int) -> None:
        width = max(0, width)
        height = max(0, height)
        if (width, height) == (self.width, self.height) and self._cells:
            return
        self.width = width
        self.height = height
        self._cells = [[Cell(bg=self.background) for _ in range(width)] for _ in range(height)]

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass

    def refresh(self) -> None:
        pass

    def poll_quit(self) -> bool:
        return False

    def clear(self) -> None:
        for row in self._cells:
            for cell in row:
                cell.char = " "
                cell.fg = None
                cell.bg = self.background

    def in_bounds(self, column: int, row: int) -> bool:
        return 0 <= column < self.width and 0 <= row < self.height

    def put_char(
        self, column: int, row: int, char: str, fg: str | None = None, bg: str | None = None
    ) -> None:
        if not self.in_bounds(column, row):
            return
        cell = self._cells[row][column]
        cell.char = char
        cell.fg = fg
        cell.bg = bg if bg is not None else self.background

    def put_string(
        self, column: int, row: int, text: str, fg: str | None = None, bg: str | None = None
    ) -> None:
        """Write text starting at (column, row); characters off the grid are skipped."""
        if row < 0 or row >= self.height:
            return
        for offset, char in enumerate(text):
            self.put_char(column + offset, row, char, fg, bg)

    def cell(self, column: int, row: int) -> Cell:
        return self._cells[row][column]

    def text_at(self, row: int, start: int = 0, end: int | None = None) -> str:
        """Plain glyphs of one row, for inspection."""
        return "".join(cell.char for cell in self._cells[row][start:end])

    def to_text(self) -> Text:
        """Build a rich Text with one styled run per stretch of equal colors."""
        text = Text(no_wrap=True, overflow="crop")
        for index, row in enumerate(self._cells):
            if index:
                text.append("\n")
            run = ""
            run_colors: tuple[str | None, str | None] | None = None
            for cell in row:
                colors = (cell.fg, cell.bg)
                if colors != run_colors and run:
                    text.append(run, style=Style(color=run_colors[0], bgcolor=run_colors[1]))
                    run = ""
                run_colors = colors
                run += cell.char
            if run and run_colors is not None:
                text.append(run, style=Style(color=run_colors[0], bgcolor=run_colors[1]))
        return text


class TerminalSurface(CellGrid):
    """
    Full-screen terminal surface backed by rich.

    The grid tracks the console size; it is re-read on every clear so the
    layout follows terminal resizes.
    """

    def __init__(self, console: Console | None = None, background: str | None = None):
        self.console = console or Console()
        width, height = self.console.size
        super().__init__(width, height, background=background)
        self._live: Live | None = None
        self._old_settings = None

    def start(self) -> None:
        """
        Enter the alternate screen and switch stdin to cbreak mode.

        Raises:
            SurfaceInitializationError: If there is no terminal or rich fails to start
        """
        if not self.console.is_terminal:
            raise SurfaceInitializationError("Output is not a terminal")

        try:
            self._live = Live(
                self.to_text(),
                console=self.console,
                screen=True,
                auto_refresh=False,
            )
            self._live.start()
        except Exception as exc:
            self._live = None
            raise SurfaceInitializationError(f"Cannot start terminal display: {exc}") from exc

        if sys.platform != "win32":
            try:
                self._old_settings = termios.tcgetattr(sys.stdin)
                tty.setcbreak(sys.stdin.fileno())
            except (termios.error, OSError, ValueError) as exc:
                logger.debug("Keyboard setup skipped: %s", exc)
                self._old_settings = None

    def stop(self) -> None:
        """Leave the alternate screen and restore terminal settings."""
        if self._live is not None:
            self._live.stop()
            self._live = None

        if self._old_settings is not None:
            try:
                termios.tcsetattr(sys.stdin, termios.TCSADRAIN, self._old_settings)
            except (termios.error, OSError) as exc:
                logger.debug("Terminal restore failed: %s", exc)
            self._old_settings = None

    def clear(self) -> None:
        width, height = self.console.size
        self.resize(width, height)
        super().clear()

    def refresh(self) -> None:
        if self._live is not None:
            self._live.update(self.to_text(), refresh=True)

    def _read_key(self) -> str | None:
        """Read one pending key without blocking."""
        try:
            if sys.platform == "win32":
                if msvcrt.kbhit():
                    return msvcrt.getch().decode("utf-8", errors="ignore")
            elif select.select([sys.stdin], [], [], 0)[0]:
                return sys.stdin.read(1)
        except (OSError, ValueError) as exc:
            logger.debug("Keyboard check error: %s", exc)
        return None

    def poll_quit(self) -> bool:
        """Drain pending keys; True if any of them is a quit key."""
        quit_requested = False
        key = self._read_key()
        while key:
            if key in QUIT_KEYS:
                quit_requested = True
            key = self._read_key()
        return quit_requested
