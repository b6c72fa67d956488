"""
Console capture for testing.

ConsoleUI instances whose terminal output goes to in-memory buffers.
"""

import io
from pathlib import Path
from typing import Optional

from rich.console import Console

from mac_tune.ui import ConsoleUI


def make_console_ui(log_file: Optional[Path] = None, quiet: bool = False) -> ConsoleUI:
    return ConsoleUI(
        quiet=quiet,
        log_file=log_file,
        console=Console(file=io.StringIO(), width=200, highlight=False),
        err_console=Console(file=io.StringIO(), width=200, highlight=False),
    )


def console_output(ui: ConsoleUI) -> str:
    """Everything printed so far to stdout and stderr."""
    return ui.console.file.getvalue() + ui.err_console.file.getvalue()
