"""Shell session: current directory state and the read-dispatch loop"""

import logging
import os

from rich.console import Console

from .commands import CommandHandler
from .config import CAPTURE_SENTINEL
from .paths import normalize_path

logger = logging.getLogger(__name__)


class ShellSession:
    """One interactive session.

    Owns the current directory (independent of the process working
    directory) and the running flag. Commands only read and change them
    through this object, so several sessions can coexist.
    """

    def __init__(
        self,
        start_dir: str = None,
        fs=None,
        console=None,
        read_command=None,
        read_line=None,
        sentinel: str = CAPTURE_SENTINEL,
    ):
        """
        Args:
            start_dir: Initial current directory (defaults to the process cwd)
            fs: File system gateway passed on to the command handler
            console: rich Console for all output
            read_command: Callable(prompt) -> str reading the next command line
            read_line: Callable(prompt) -> str reading capture text for cat
                (defaults to read_command)
            sentinel: Line that ends interactive capture
        """
        self.current_directory = normalize_path(os.path.abspath(start_dir or os.getcwd()))
        self.running = True
        self.console = console or Console(highlight=False)
        self.read_command = read_command or input
        self.handler = CommandHandler(
            self,
            fs=fs,
            console=self.console,
            read_line=read_line or self.read_command,
            sentinel=sentinel,
        )

    @property
    def prompt(self) -> str:
        return f"{self.current_directory}> "

    def execute(self, line: str) -> bool:
        """Execute one input line. Returns False once the session has ended."""
        return self.handler.execute(line)

    def run(self):
        """Read and execute lines until exit or end of input"""
        while self.running:
            try:
                line = self.read_command(self.prompt)
            except KeyboardInterrupt:
                self.console.print("\nUse 'exit' to leave", highlight=False, soft_wrap=True)
                continue
            except EOFError:
                # end of input behaves like 'exit'
                self.console.print(highlight=False, soft_wrap=True)
                self.handler.cmd_exit([])
                break

            try:
                self.execute(line.strip())
            except KeyboardInterrupt:
                self.console.print("^C", highlight=False, soft_wrap=True)
            except Exception as e:
                logger.error("Unexpected error", exc_info=True)
                self.console.print(f"Unexpected error: {e}", style="red", highlight=False, markup=False, soft_wrap=True)
