"""REPL Command Handlers"""

import logging
import os
from typing import List

from rich.console import Console

from .cat import CatCommand
from .config import CAPTURE_SENTINEL
from .filesystem import ErrorKind, FileSystemError, LocalFileSystem
from .parser import Command, ParseError, parse_ls_args
from . import paths

logger = logging.getLogger(__name__)

HELP_ROWS = [
    ("pwd", "Print current working directory."),
    ("cd <dir>", "Change directory."),
    ("ls [-a] [-r]", "List files (-a: include hidden, -r: reverse sorted order)."),
    ("ls [-a] -R", "List the whole tree below the current directory."),
    ("ls | grep <term>", "List files whose name contains <term>."),
    ("mkdir <dir> [dir...]", "Create new directories."),
    ("rmdir <dir> [dir...]", "Remove empty directories."),
    ("touch <file> [file...]", "Create empty files."),
    ("mv <src> <dst>", "Rename src to dst, or move src into dst if it is a directory."),
    ("mv <src...> <dir>", "Move several files into an existing directory."),
    ("rm <file> [file...]", "Remove files."),
    ("cat", "Type text until 'EOF' and echo it back."),
    ("cat <file> [file...]", "Display files; a missing file is created from typed text."),
    ("cat [file...] > <file>", "Write files (or typed text) to a file, replacing it."),
    ("cat [file...] >> <file>", "Append files (or typed text) to a file."),
    ("exit", "Terminate the CLI."),
    ("help", "Display this help message."),
]


class CommandHandler:
    """Handler for REPL commands"""

    def __init__(self, session, fs=None, console=None, read_line=None, sentinel=CAPTURE_SENTINEL):
        """
        Args:
            session: ShellSession owning the current directory and running flag
            fs: File system gateway (LocalFileSystem by default)
            console: rich Console receiving all output
            read_line: Callable(prompt) -> str used for interactive capture;
                raises EOFError at end of input
            sentinel: Line that ends interactive capture
        """
        self.session = session
        self.fs = fs or LocalFileSystem()
        self.console = console or Console(highlight=False)
        self.read_line = read_line or input
        self.sentinel = sentinel
        self.cat = CatCommand(self)

        # name -> (minimum argument count, handler)
        self.commands = {
            "pwd": (0, self.cmd_pwd),
            "cd": (1, self.cmd_cd),
            "ls": (0, self.cmd_ls),
            "mkdir": (1, self.cmd_mkdir),
            "rmdir": (1, self.cmd_rmdir),
            "touch": (1, self.cmd_touch),
            "rm": (1, self.cmd_rm),
            "mv": (2, self.cmd_mv),
            "cat": (0, self.cat.execute),
            "exit": (0, self.cmd_exit),
            "help": (0, self.cmd_help),
        }

    def execute(self, line: str) -> bool:
        """Execute a command. Returns False if should exit."""
        command = Command.from_line(line.strip())
        if not command.name:
            # blank line
            return self.session.running

        entry = self.commands.get(command.name)
        if entry is None:
            self._print(f"Command not found: {command.name}")
            return self.session.running

        min_args, func = entry
        if len(command.args) < min_args:
            self._print(f"{command.name}: missing operand")
            return self.session.running

        logger.debug("dispatch %s %s", command.name, command.args)
        try:
            func(command.args)
        except Exception as e:
            logger.error("Unexpected error in %s", command.name, exc_info=True)
            self._error(f"Error: {e}")
        return self.session.running

    def _print(self, message: str = ""):
        self.console.print(message, highlight=False, markup=False, emoji=False, soft_wrap=True)

    def _error(self, message: str):
        self.console.print(message, style="red", highlight=False, markup=False, emoji=False, soft_wrap=True)

    def print_text(self, text: str):
        """Print user data verbatim (no markup, emoji or wrapping)"""
        self.console.print(text, highlight=False, markup=False, emoji=False, soft_wrap=True)

    def resolve_path(self, path: str) -> str:
        """Resolve a path against the session's current directory"""
        return paths.resolve_path(self.session.current_directory, path)

    def _holds_current_directory(self, path: str) -> bool:
        """True if path is the current directory or one of its ancestors"""
        current = self.session.current_directory
        return current == path or current.startswith(path.rstrip(os.sep) + os.sep)

    def cmd_pwd(self, args: List[str]) -> bool:
        """Print working directory"""
        self._print(self.session.current_directory)
        return True

    def cmd_cd(self, args: List[str]) -> bool:
        """Change directory"""
        path = self.resolve_path(args[0])
        if not self.fs.exists(path):
            self._print(f"cd: no such file or directory: {args[0]}")
        elif not self.fs.is_directory(path):
            self._print(f"cd: not a directory: {args[0]}")
        else:
            self.session.current_directory = path
        return True

    def cmd_ls(self, args: List[str]) -> bool:
        """List the current directory"""
        try:
            options = parse_ls_args(args)
        except ParseError as e:
            self._print(f"ls: {e}")
            return True

        current = self.session.current_directory
        if options.recursive:
            self._ls_recursive(current, options.show_hidden)
            return True

        try:
            names = self.fs.list_children(current)
        except FileSystemError as e:
            self._print(f"ls: Error reading directory: {e}")
            return True

        if options.grep is not None:
            for name in names:
                if options.grep in name:
                    self.print_text(name)
            return True

        if not options.show_hidden:
            names = [name for name in names if not name.startswith(".")]
        if options.reverse:
            names = sorted(names, reverse=True)

        self._print(f"Listing files in: {current}")
        for name in names:
            self.print_text(name)
        return True

    def _ls_recursive(self, current: str, show_hidden: bool):
        entries = self.fs.walk(current, include_hidden=show_hidden)
        try:
            first = next(entries, None)
        except FileSystemError as e:
            self._print(f"ls: Error reading directory: {e}")
            return

        self._print(f"Listing files in: {current}")
        if first is None:
            return
        self.print_text(first[0])
        for relative, _ in entries:
            self.print_text(relative)

    def cmd_mkdir(self, args: List[str]) -> bool:
        """Create directories"""
        for name in args:
            path = self.resolve_path(name)
            try:
                self.fs.create_directory(path)
                self._print(f"Directory created: {name}")
            except FileSystemError as e:
                self._print(f"mkdir: cannot create directory '{name}': {e}")
        return True

    def cmd_rmdir(self, args: List[str]) -> bool:
        """Remove empty directories"""
        for name in args:
            path = self.resolve_path(name)
            try:
                if not self.fs.exists(path):
                    raise FileSystemError(ErrorKind.NOT_FOUND, path)
                if not self.fs.is_directory(path):
                    raise FileSystemError(ErrorKind.NOT_A_DIRECTORY, path)
                if self._holds_current_directory(path):
                    raise FileSystemError(
                        ErrorKind.IO_ERROR, path, "Cannot remove the current directory"
                    )
                self.fs.delete(path)
                self._print(f"Directory removed: {name}")
            except FileSystemError as e:
                self._print(f"rmdir: failed to remove '{name}': {e}")
        return True

    def cmd_touch(self, args: List[str]) -> bool:
        """Create empty files"""
        for name in args:
            path = self.resolve_path(name)
            try:
                self.fs.create_file(path)
                self._print(f"File created: {name}")
            except FileSystemError as e:
                self._print(f"touch: cannot create file '{name}': {e}")
        return True

    def cmd_rm(self, args: List[str]) -> bool:
        """Remove files (directories are refused)"""
        for name in args:
            path = self.resolve_path(name)
            try:
                if not self.fs.exists(path):
                    raise FileSystemError(ErrorKind.NOT_FOUND, path)
                if self.fs.is_directory(path):
                    raise FileSystemError(ErrorKind.IS_A_DIRECTORY, path)
                self.fs.delete(path)
                self._print(f"File removed: {name}")
            except FileSystemError as e:
                self._print(f"rm: cannot remove '{name}': {e}")
        return True

    def cmd_mv(self, args: List[str]) -> bool:
        """Move/rename files"""
        # Destination is always the last argument
        dst = self.resolve_path(args[-1])
        sources = args[:-1]

        if self.fs.is_directory(dst):
            for name in sources:
                src = self.resolve_path(name)
                final_dst = os.path.join(dst, os.path.basename(src))
                if self._move(name, src, final_dst):
                    self._print(f"File moved to directory: {final_dst}")
            return True

        if len(sources) > 1:
            self._print(f"mv: target '{args[-1]}' is not a directory")
            return True

        src = self.resolve_path(sources[0])
        if self._move(sources[0], src, dst):
            self._print(f"File renamed to: {dst}")
        return True

    def _move(self, name: str, src: str, dst: str) -> bool:
        if not self.fs.exists(src):
            self._print(f"mv: cannot stat '{name}': No such file or directory")
            return False
        if self._holds_current_directory(src):
            self._print(f"mv: cannot move '{name}': Cannot move the current directory")
            return False
        try:
            self.fs.move(src, dst, overwrite=False)
        except FileSystemError as e:
            if e.kind is ErrorKind.ALREADY_EXISTS:
                self._print(f"mv: cannot move '{name}' to '{dst}': {e}")
            else:
                self._print(f"mv: cannot move '{name}': {e}")
            return False
        return True

    def cmd_help(self, args: List[str]) -> bool:
        """Show help information"""
        self.console.print("[bold]Supported commands:[/bold]", highlight=False, soft_wrap=True)
        for usage, description in HELP_ROWS:
            self._print(f"  {usage:<26} {description}")
        return True

    def cmd_exit(self, args: List[str]) -> bool:
        """Exit REPL"""
        self._print("Exiting the CLI...")
        self.session.running = False
        return False
