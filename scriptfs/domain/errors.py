"""Error taxonomy for sandboxed filesystem access."""

from pathlib import PurePath
from typing import Optional, Union


class SandboxError(Exception):
    """Base class for every error raised by the sandbox layer."""


class NotWhitelisted(SandboxError):
    """Raised when a path falls outside both permitted roots."""

    def __init__(self, path: Union[str, PurePath], operation: str = "access"):
        self.path = str(path)
        self.operation = operation
        super().__init__(
            f"{operation}: '{self.path}' is not within an allowed directory"
        )


class NotFound(SandboxError):
    """Raised when an operation requires an existing target."""

    def __init__(self, path: Union[str, PurePath], kind: str = "File"):
        self.path = str(path)
        super().__init__(f"{kind} doesn't exist: '{self.path}'")


class NotAbsolutePath(SandboxError):
    """Raised when an ancestor check receives a relative path."""

    def __init__(self, path: Union[str, PurePath]):
        self.path = str(path)
        super().__init__(f"Not an absolute path: '{self.path}'")


class SaveDataLocationUnresolvable(SandboxError):
    """Raised when no save data candidate passes marker validation."""


class Utf8DecodeError(SandboxError):
    """Raised when content read as text is not valid UTF-8."""

    def __init__(self, source: str, reason: Optional[str] = None):
        self.source = source
        message = f"Content of '{source}' is not valid UTF-8"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidPath(SandboxError):
    """Raised for paths that cannot name a file or directory."""

    def __init__(self, path: Union[str, PurePath], reason: str):
        self.path = str(path)
        super().__init__(f"Invalid path '{self.path}': {reason}")
