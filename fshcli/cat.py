"""cat: display files, capture typed text, or redirect into a file"""

import logging
from typing import List

from .filesystem import ErrorKind, FileSystemError, WriteMode
from .parser import ParseError, RedirectMode, RedirectSpec, parse_redirect

logger = logging.getLogger(__name__)


class CatCommand:
    """Cat command - the three modes of cat.

    - no arguments: read typed lines until the sentinel and echo them back
    - files, no redirection: print each file, or create and fill it if missing
    - ``>`` / ``>>``: write sources (or typed lines) into a target file
    """

    def __init__(self, handler):
        """Initialize with reference to CommandHandler.

        Args:
            handler: CommandHandler instance for accessing the file system,
                console, input reader and path resolution
        """
        self.handler = handler

    @property
    def console(self):
        return self.handler.console

    @property
    def fs(self):
        return self.handler.fs

    def execute(self, args: List[str]) -> bool:
        """Execute cat command.

        Args:
            args: Command arguments (not including 'cat')

        Returns:
            True (cat never ends the session)
        """
        try:
            spec = parse_redirect(args)
        except ParseError as e:
            self.console.print(f"cat: {e}", highlight=False, soft_wrap=True)
            return True

        logger.debug("cat mode=%s sources=%s target=%s", spec.mode.name, spec.sources, spec.target)

        try:
            if spec.mode is not RedirectMode.NONE:
                self._redirect(spec)
            elif not spec.sources:
                self._echo_capture()
            else:
                self._display(spec.sources)
        except KeyboardInterrupt:
            # Ctrl+C abandons the capture, lines already written stay
            self.console.print("^C", highlight=False, soft_wrap=True)
        return True

    def capture(self, sink=None) -> List[str]:
        """Read typed lines until the sentinel line.

        Args:
            sink: Optional callable invoked with each line as it is read

        Returns:
            Captured lines (sentinel excluded)
        """
        sentinel = self.handler.sentinel
        lines = []
        while True:
            try:
                line = self.handler.read_line("")
            except EOFError:
                # end of input closes the capture like the sentinel would
                break
            if line == sentinel:
                break
            if sink is not None:
                sink(line)
            lines.append(line)
        return lines

    def _echo_capture(self):
        sentinel = self.handler.sentinel
        self.console.print(
            f"Enter text (type '{sentinel}' on a new line to finish):", highlight=False, soft_wrap=True
        )
        lines = self.capture()
        self.console.print(highlight=False, soft_wrap=True)
        self.console.print("You entered:", highlight=False, soft_wrap=True)
        for line in lines:
            self.handler.print_text(line)

    def _display(self, sources: List[str]):
        for name in sources:
            path = self.handler.resolve_path(name)
            if self.fs.exists(path):
                try:
                    lines = self.fs.read_lines(path)
                except FileSystemError as e:
                    self.console.print(
                        f"cat: error reading file '{name}': {e}", highlight=False, markup=False, soft_wrap=True
                    )
                    continue
                for line in lines:
                    self.handler.print_text(line)
            else:
                self._create_and_fill(name, path)

    def _create_and_fill(self, name: str, path: str):
        sentinel = self.handler.sentinel
        self.console.print(f"File not found. Creating new file: {name}", highlight=False, markup=False, soft_wrap=True)
        try:
            self.fs.create_file(path)
        except FileSystemError as e:
            self.console.print(
                f"cat: cannot create file '{name}': {e}", highlight=False, markup=False, soft_wrap=True
            )
            return

        self.console.print(
            f"Enter text to write to {name} (type '{sentinel}' on a new line to finish):",
            highlight=False,
            markup=False,
            soft_wrap=True,
        )
        try:
            with self.fs.open_for_write(path, WriteMode.TRUNCATE) as writer:
                self.capture(lambda line: writer.write(line + "\n"))
        except (FileSystemError, OSError) as e:
            self.console.print(
                f"cat: error writing to file '{name}': {e}", highlight=False, markup=False, soft_wrap=True
            )
            return
        self.console.print(f"Text written to file: {name}", highlight=False, markup=False, soft_wrap=True)

    def _redirect(self, spec: RedirectSpec):
        target_path = self.handler.resolve_path(spec.target)
        mode = WriteMode.APPEND if spec.mode is RedirectMode.APPEND else WriteMode.TRUNCATE

        if self.fs.is_directory(target_path):
            self.console.print(
                f"cat: {spec.target}: {FileSystemError(ErrorKind.IS_A_DIRECTORY, target_path)}",
                highlight=False,
                markup=False,
                soft_wrap=True,
            )
            return

        try:
            with self.fs.open_for_write(target_path, mode) as writer:
                if not spec.sources:
                    sentinel = self.handler.sentinel
                    self.console.print(
                        f"Enter text (type '{sentinel}' on a new line to finish):",
                        highlight=False,
                        soft_wrap=True,
                    )
                    self.capture(lambda line: writer.write(line + "\n"))
                else:
                    self._copy_sources(spec.sources, writer)
        except (FileSystemError, OSError) as e:
            self.console.print(
                f"cat: cannot write to '{spec.target}': {e}", highlight=False, markup=False, soft_wrap=True
            )
            return

        if mode is WriteMode.APPEND:
            self.console.print(f"Content appended to file: {spec.target}", highlight=False, markup=False, soft_wrap=True)
        else:
            self.console.print(f"Content written to file: {spec.target}", highlight=False, markup=False, soft_wrap=True)

    def _copy_sources(self, sources: List[str], writer):
        for name in sources:
            path = self.handler.resolve_path(name)
            if not self.fs.exists(path):
                self.console.print(f"cat: {name}: file not found", highlight=False, markup=False, soft_wrap=True)
                continue
            try:
                lines = self.fs.read_lines(path)
            except FileSystemError as e:
                self.console.print(
                    f"cat: error reading file '{name}': {e}", highlight=False, markup=False, soft_wrap=True
                )
                continue
            for line in lines:
                writer.write(line + "\n")
