"""Main CLI Entry Point"""

import logging
import os
import sys
import tempfile

import click
from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import FileHistory
from rich.console import Console

from .config import Config
from .filesystem import FileSystemError
from .session import ShellSession
from .version import get_version_string

console = Console(highlight=False)
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class FshCompleter(Completer):
    """Custom completer for fsh commands and file paths"""

    def __init__(self, session: ShellSession):
        self.session = session
        self.command_names = list(session.handler.commands.keys())

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        words = text.split()

        # If we're at the start or only typing the command
        if len(words) == 0 or (len(words) == 1 and not text.endswith(" ")):
            word = words[0] if words else ""
            for cmd in self.command_names:
                if cmd.startswith(word):
                    yield Completion(cmd, start_position=-len(word))
            return

        # Arguments are paths
        current_word = "" if text.endswith(" ") else words[-1]

        if "/" in current_word:
            last_slash = current_word.rfind("/")
            dir_part = current_word[: last_slash + 1]
            file_part = current_word[last_slash + 1 :]
            list_path = self.session.handler.resolve_path(dir_part)
        else:
            dir_part = ""
            file_part = current_word
            list_path = self.session.current_directory

        fs = self.session.handler.fs
        try:
            names = fs.list_children(list_path)
        except FileSystemError:
            # If we can't list the directory, just skip completion
            return

        for name in names:
            if not name.startswith(file_part):
                continue
            # Hidden entries only when asked for explicitly
            if name.startswith(".") and not file_part.startswith("."):
                continue
            is_dir = fs.is_directory(os.path.join(list_path, name))
            display_name = name + "/" if is_dir else name
            yield Completion(
                dir_part + display_name,
                start_position=-len(current_word),
                display=display_name,
            )


def open_history(history_path: str) -> FileHistory:
    """Open the history file, falling back to a temporary one"""
    try:
        os.makedirs(os.path.dirname(history_path) or ".", exist_ok=True)
        with open(history_path, "a"):
            pass  # Just test if we can open for append
        return FileHistory(history_path)
    except OSError:
        temp_history = tempfile.NamedTemporaryFile(
            mode="w", delete=False, suffix="_fsh_history"
        )
        temp_history_path = temp_history.name
        temp_history.close()
        console.print(
            f"[yellow]Warning: Cannot use {history_path}, using temporary history file[/yellow]",
            highlight=False,
            soft_wrap=True,
        )
        return FileHistory(temp_history_path)


def configure_logging(level: str):
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING), format=LOG_FORMAT)


def build_session(config: Config, interactive: bool) -> ShellSession:
    """Create a session wired to prompt_toolkit (terminal) or input() (pipe)"""
    session = ShellSession(config.start_dir, console=console, sentinel=config.sentinel)
    if not interactive:
        return session

    command_prompt = PromptSession(
        history=open_history(config.history_file),
        auto_suggest=AutoSuggestFromHistory(),
        completer=FshCompleter(session),
        complete_while_typing=False,
    )
    # Captured text must not end up in command history
    text_prompt = PromptSession()
    session.read_command = command_prompt.prompt
    session.handler.read_line = text_prompt.prompt
    return session


def start_repl(config: Config):
    """Start interactive REPL session"""
    interactive = sys.stdin.isatty()
    session = build_session(config, interactive)
    if interactive:
        console.print(f"[dim]{get_version_string()}[/dim]", highlight=False, soft_wrap=True)
        console.print("Type 'help' for help, 'exit' to quit", highlight=False, soft_wrap=True)
    logger.info("Session started in %s", session.current_directory)
    session.run()


@click.command()
@click.version_option(version=get_version_string(), prog_name="fsh")
@click.option(
    "-C",
    "--directory",
    "start_dir",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    default=None,
    help="Start in this directory instead of the current one",
)
@click.option(
    "--history-file",
    default=None,
    help="Command history file",
    show_default="~/.fsh_history",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Diagnostic log level (logs go to stderr)",
)
def main(start_dir, history_file, log_level):
    """fsh - interactive shell for the local filesystem"""
    config = Config.from_args(start_dir=start_dir, history_file=history_file, log_level=log_level)
    configure_logging(config.log_level)
    start_repl(config)


if __name__ == "__main__":
    main()
