"""Command line tokenizer and argument parsers"""

import enum
from dataclasses import dataclass, field
from typing import List, Optional

REDIRECT_OVERWRITE = ">"
REDIRECT_APPEND = ">>"
PIPE = "|"


class ParseError(ValueError):
    """Raised when a command line cannot be parsed"""
    pass


def tokenize(line: str) -> List[str]:
    """
    Split a raw input line into tokens on runs of whitespace

    Args:
        line: Raw input line

    Returns:
        Non-empty tokens in order. Blank input yields [''] so that callers
        always have a first token to inspect.

    Example:
        >>> tokenize("cat a.txt  >> b.txt")
        ['cat', 'a.txt', '>>', 'b.txt']
    """
    tokens = line.split()
    return tokens or [""]


@dataclass
class Command:
    """A parsed command: name plus ordered arguments"""

    name: str
    args: List[str] = field(default_factory=list)

    @classmethod
    def from_line(cls, line: str) -> "Command":
        tokens = tokenize(line)
        return cls(tokens[0], tokens[1:])


class RedirectMode(enum.Enum):
    NONE = "none"
    OVERWRITE = ">"
    APPEND = ">>"


@dataclass
class RedirectSpec:
    """Result of scanning cat arguments for > or >>"""

    mode: RedirectMode
    target: Optional[str] = None
    sources: List[str] = field(default_factory=list)


def parse_redirect(args: List[str]) -> RedirectSpec:
    """
    Parse redirection operators in cat arguments

    Only the first > or >> (scanning left to right) is honored. Arguments
    before it are sources, the single argument after it is the target;
    anything following the target is ignored.

    Args:
        args: Command arguments (not including the command name)

    Returns:
        RedirectSpec

    Raises:
        ParseError: If the operator is the last argument

    Example:
        >>> parse_redirect(["a", "b", ">", "c"])
        RedirectSpec(mode=<RedirectMode.OVERWRITE: '>'>, target='c', sources=['a', 'b'])
    """
    for i, arg in enumerate(args):
        if arg == REDIRECT_OVERWRITE:
            mode = RedirectMode.OVERWRITE
        elif arg == REDIRECT_APPEND:
            mode = RedirectMode.APPEND
        else:
            continue

        if i + 1 >= len(args):
            raise ParseError("syntax error near unexpected token `newline'")
        return RedirectSpec(mode, args[i + 1], list(args[:i]))

    return RedirectSpec(RedirectMode.NONE, None, list(args))


@dataclass
class LsOptions:
    """Listing policy selected by ls arguments"""

    show_hidden: bool = False
    reverse: bool = False
    recursive: bool = False
    grep: Optional[str] = None


def parse_ls_args(args: List[str]) -> LsOptions:
    """
    Parse ls arguments

    Accepted forms:
        ls [-a] [-r]
        ls [-a] -R
        ls | grep TERM

    Raises:
        ParseError: On an unknown flag or a malformed pipeline
    """
    options = LsOptions()

    if args and args[0] == PIPE:
        if len(args) < 2 or args[1] != "grep":
            raise ParseError(f"Invalid option: {args[1] if len(args) > 1 else PIPE}")
        if len(args) < 3:
            raise ParseError("grep: missing pattern")
        if len(args) > 3:
            raise ParseError(f"Invalid option: {args[3]}")
        options.grep = args[2]
        return options

    for arg in args:
        if arg == "-a":
            options.show_hidden = True
        elif arg == "-r":
            options.reverse = True
        elif arg == "-R":
            options.recursive = True
        else:
            raise ParseError(f"Invalid option: {arg}")

    if options.recursive and options.reverse:
        raise ParseError("-r cannot be combined with -R")

    return options
