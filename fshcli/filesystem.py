"""Local file system abstraction layer"""

import enum
import errno
import logging
import os
import shutil
from typing import IO, Iterator, List, Tuple

logger = logging.getLogger(__name__)


class ErrorKind(enum.Enum):
    """Failure categories reported by the file system layer"""

    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    NOT_A_DIRECTORY = "not_a_directory"
    IS_A_DIRECTORY = "is_a_directory"
    IO_ERROR = "io_error"


_ERRNO_KINDS = {
    errno.ENOENT: ErrorKind.NOT_FOUND,
    errno.EEXIST: ErrorKind.ALREADY_EXISTS,
    errno.ENOTDIR: ErrorKind.NOT_A_DIRECTORY,
    errno.EISDIR: ErrorKind.IS_A_DIRECTORY,
}

_DEFAULT_MESSAGES = {
    ErrorKind.NOT_FOUND: "No such file or directory",
    ErrorKind.ALREADY_EXISTS: "File exists",
    ErrorKind.NOT_A_DIRECTORY: "Not a directory",
    ErrorKind.IS_A_DIRECTORY: "Is a directory",
    ErrorKind.IO_ERROR: "Input/output error",
}


class FileSystemError(Exception):
    """Typed error raised by LocalFileSystem operations"""

    def __init__(self, kind: ErrorKind, path: str, message: str = None):
        self.kind = kind
        self.path = path
        self.message = message or _DEFAULT_MESSAGES[kind]
        super().__init__(self.message)

    @classmethod
    def from_os_error(cls, error: OSError, path: str) -> "FileSystemError":
        """Translate an OSError into a FileSystemError"""
        kind = _ERRNO_KINDS.get(error.errno, ErrorKind.IO_ERROR)
        # Windows reports some of these without a matching errno
        if isinstance(error, FileNotFoundError):
            kind = ErrorKind.NOT_FOUND
        elif isinstance(error, FileExistsError):
            kind = ErrorKind.ALREADY_EXISTS
        elif isinstance(error, NotADirectoryError):
            kind = ErrorKind.NOT_A_DIRECTORY
        elif isinstance(error, IsADirectoryError):
            kind = ErrorKind.IS_A_DIRECTORY
        return cls(kind, path, error.strerror or str(error))

    def __repr__(self):
        return f"FileSystemError({self.kind.name}, {self.path!r}, {self.message!r})"


class WriteMode(enum.Enum):
    """How open_for_write treats existing content"""

    TRUNCATE = "w"
    APPEND = "a"


class LocalFileSystem:
    """Abstraction layer for local file system operations"""

    def __init__(self, encoding: str = "utf-8"):
        """
        Initialize local file system

        Args:
            encoding: Text encoding used for reading and writing files
        """
        self.encoding = encoding

    def exists(self, path: str) -> bool:
        """Check if path exists"""
        return os.path.exists(path)

    def is_directory(self, path: str) -> bool:
        """Check if path is a directory"""
        return os.path.isdir(path)

    def list_children(self, path: str) -> List[str]:
        """
        List directory entry names

        Args:
            path: Directory path

        Returns:
            Entry names (not full paths) in lexicographic order

        Raises:
            FileSystemError: If directory cannot be listed
        """
        logger.debug("list_children %s", path)
        try:
            return sorted(os.listdir(path))
        except OSError as e:
            raise FileSystemError.from_os_error(e, path)

    def walk(self, path: str, include_hidden: bool = True) -> Iterator[Tuple[str, bool]]:
        """
        Walk a directory tree depth-first

        Each directory is yielded before its contents and siblings come in
        lexicographic order. Symbolic links are reported but never followed.

        Args:
            path: Root directory (not itself yielded)
            include_hidden: If False, skip dot entries and everything below them

        Yields:
            (relative_path, is_directory) tuples, relative to path

        Raises:
            FileSystemError: If the root directory cannot be listed
        """
        try:
            entries = sorted(os.scandir(path), key=lambda entry: entry.name)
        except OSError as e:
            raise FileSystemError.from_os_error(e, path)
        yield from self._walk_entries(entries, "", include_hidden)

    def _walk_entries(self, entries, prefix: str, include_hidden: bool):
        for entry in entries:
            if not include_hidden and entry.name.startswith("."):
                continue
            relative = os.path.join(prefix, entry.name) if prefix else entry.name
            is_dir = entry.is_dir(follow_symlinks=False)
            yield relative, is_dir
            if not is_dir:
                continue
            try:
                children = sorted(os.scandir(entry.path), key=lambda child: child.name)
            except OSError as e:
                logger.warning("Skipping unreadable directory %s: %s", entry.path, e)
                continue
            yield from self._walk_entries(children, relative, include_hidden)

    def create_file(self, path: str) -> None:
        """
        Create an empty file

        Raises:
            FileSystemError: ALREADY_EXISTS if path exists, otherwise IO failures
        """
        logger.debug("create_file %s", path)
        try:
            # 'x' refuses to touch an existing file
            with open(path, "x", encoding=self.encoding):
                pass
        except OSError as e:
            raise FileSystemError.from_os_error(e, path)

    def create_directory(self, path: str) -> None:
        """
        Create a single directory (parents must exist)

        Raises:
            FileSystemError: ALREADY_EXISTS if path exists, otherwise IO failures
        """
        logger.debug("create_directory %s", path)
        try:
            os.mkdir(path)
        except OSError as e:
            raise FileSystemError.from_os_error(e, path)

    def delete(self, path: str) -> None:
        """
        Delete a file or an empty directory

        Raises:
            FileSystemError: NOT_FOUND, or IO_ERROR for a non-empty directory
        """
        logger.debug("delete %s", path)
        try:
            if os.path.isdir(path) and not os.path.islink(path):
                os.rmdir(path)
            else:
                os.remove(path)
        except OSError as e:
            raise FileSystemError.from_os_error(e, path)

    def move(self, source: str, destination: str, overwrite: bool = False) -> None:
        """
        Move or rename a file or directory

        Args:
            source: Existing path
            destination: Full target path (not a containing directory)
            overwrite: If False, an existing destination is an error

        Raises:
            FileSystemError: NOT_FOUND, ALREADY_EXISTS or IO_ERROR
        """
        logger.debug("move %s -> %s (overwrite=%s)", source, destination, overwrite)
        if not os.path.lexists(source):
            raise FileSystemError(ErrorKind.NOT_FOUND, source)
        if not overwrite and os.path.lexists(destination):
            raise FileSystemError(ErrorKind.ALREADY_EXISTS, destination)
        if os.path.isdir(source):
            src = os.path.abspath(source)
            dst = os.path.abspath(destination)
            if dst == src or dst.startswith(src.rstrip(os.sep) + os.sep):
                raise FileSystemError(
                    ErrorKind.IO_ERROR,
                    destination,
                    "Cannot move a directory into itself",
                )
        try:
            shutil.move(source, destination)
        except OSError as e:
            raise FileSystemError.from_os_error(e, source)

    def read_lines(self, path: str) -> List[str]:
        """
        Read all lines of a text file

        Returns:
            Lines without their terminators

        Raises:
            FileSystemError: If file cannot be read or decoded
        """
        logger.debug("read_lines %s", path)
        try:
            with open(path, "r", encoding=self.encoding, newline=None) as f:
                content = f.read()
        except OSError as e:
            raise FileSystemError.from_os_error(e, path)
        except UnicodeDecodeError:
            raise FileSystemError(
                ErrorKind.IO_ERROR, path, f"Cannot decode file as {self.encoding}"
            )

        # Universal newlines turn \r and \r\n into \n; other separators stay in the line
        lines = content.split("\n")
        if lines[-1] == "":
            lines.pop()
        return lines

    def open_for_write(self, path: str, mode: WriteMode = WriteMode.TRUNCATE, create: bool = True) -> IO[str]:
        """
        Open a text file for writing

        The returned file object is a context manager; callers use it in a
        ``with`` block so the handle is released on every exit path.

        Args:
            path: File path
            mode: TRUNCATE to replace content, APPEND to add after it
            create: If False, a missing file is an error

        Raises:
            FileSystemError: If file cannot be opened
        """
        logger.debug("open_for_write %s (%s, create=%s)", path, mode.name, create)
        if not create and not os.path.exists(path):
            raise FileSystemError(ErrorKind.NOT_FOUND, path)
        try:
            # newline=None writes os.linesep for every '\n'
            return open(path, mode.value, encoding=self.encoding)
        except OSError as e:
            raise FileSystemError.from_os_error(e, path)
