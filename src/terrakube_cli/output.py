"""Diagnostics on stderr, kept apart from the rendered data on stdout.

Rendered resources are the only thing terrakube writes to stdout (see
:func:`terrakube_cli.renderer.render`), so ``terrakube ... -o tsv | cut``
always sees clean rows. Status lines, warnings, errors and the ``--verbose``
request trace go to stderr through the global :class:`OutputManager`.

Colour is disabled by ``--no-color``, by a set ``NO_COLOR`` variable, or by
``TERM=dumb``. Without colour, messages are written with plain ``print`` and
carry a textual prefix (``Error:``, ``Warning:``, ``[debug]``).

The manager is installed by :func:`~terrakube_cli.app.main_callback`. Code
outside the app calls the module-level helpers (:func:`info`, :func:`error`,
:func:`debug`, ...) which fall back to a default manager.
"""

from __future__ import annotations

import os
import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape


class OutputManager:
    """Stderr diagnostics with quiet and verbose switches.

    Args:
        no_color: Disable colour and Rich markup.
        quiet: Drop info and success messages. Warnings and errors stay.
        verbose: Show debug messages.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._console = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def no_color(self) -> bool:
        return self._no_color

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    def _emit(self, message: str, prefix: str = "", style: str = "") -> None:
        """Write one message to stderr.

        Args:
            message: Plain text; Rich markup in it is escaped.
            prefix: Label put before the message, e.g. ``"Error:"``.
            style: Rich style of the label (or of the whole line when
                there is no label).
        """
        if self._no_color:
            line = f"{prefix} {message}" if prefix else message
            print(line, file=sys.stderr, flush=True)
            return

        text = escape(message)
        if prefix:
            label = escape(prefix)
            self._console.print(f"[{style}]{label}[/{style}] {text}" if style else f"{label} {text}")
        elif style:
            self._console.print(f"[{style}]{text}[/{style}]")
        else:
            self._console.print(text)

    def info(self, message: str) -> None:
        """Status line. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message)

    def success(self, message: str) -> None:
        """Green confirmation line. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message, style="green")

    def warning(self, message: str) -> None:
        """Warning, shown even with ``--quiet``."""
        self._emit(message, prefix="Warning:", style="yellow")

    def error(self, message: str) -> None:
        """Error, always shown. Only :func:`terrakube_cli.app.main` reports errors."""
        self._emit(message, prefix="Error:", style="bold red")

    def debug(self, message: str) -> None:
        """Trace line (resolution steps, HTTP calls). Shown with ``--verbose`` only."""
        if self._verbose:
            self._emit(message, prefix="[debug]", style="dim")


def _should_disable_color() -> bool:
    """Return ``True`` when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one if needed."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global manager."""
    global _output
    _output = output


def reset_output() -> None:
    """Forget the global manager. Used by the test suite between tests."""
    global _output
    _output = None


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
