"""Behaviour shared by every sandboxed filesystem entry."""

import contextlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

from scriptfs.domain.caller import CallerLoggerAdapter
from scriptfs.domain.errors import InvalidPath
from scriptfs.domain.paths import has_final_component, normalize, relative_between
from scriptfs.domain.roots import Root

if TYPE_CHECKING:
    from scriptfs.domain.directory import Directory
    from scriptfs.domain.sandbox import Sandbox

ENTRY_LOGGER = CallerLoggerAdapter(logging.getLogger("scriptfs.domain.entry"), {})


class Located:
    """An absolute path inside the sandbox plus the context that vets it.

    Values are immutable and compare by kind and path. Subclasses set
    ``TRAILER`` to the suffix their rendered path carries.
    """

    TRAILER = ""
    KIND = "entry"

    __slots__ = ("_sandbox", "_path")

    def __init__(self, sandbox: "Sandbox", path: Path) -> None:
        path = Path(path)
        if not path.is_absolute():
            raise InvalidPath(path, "path must be absolute")
        if not has_final_component(path):
            raise InvalidPath(path, "path has no final component")
        self._sandbox = sandbox
        self._path = path

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._path))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"

    @property
    def os_path(self) -> Path:
        """The wrapped OS-native absolute path."""
        return self._path

    @property
    def path(self) -> str:
        return normalize(self._path) + self.TRAILER

    @property
    def name(self) -> str:
        return self._path.name

    def root_kind(self) -> Root:
        """Return which root contains this entry."""
        kind, _ = self._sandbox.path_filter.root_of(self._path)
        return kind

    def root(self) -> "Directory":
        """Return the root directory containing this entry."""
        _, root_path = self._sandbox.path_filter.root_of(self._path)
        return self._sandbox.directory(root_path)

    def relative_path(self) -> str:
        """Return this entry's path relative to its root; ``""`` for a root."""
        _, root_path = self._sandbox.path_filter.root_of(self._path)
        relative = relative_between(root_path, self._path)
        if not relative:
            return ""
        return relative + self.TRAILER

    def parent(self) -> "Directory":
        """Return the containing directory, which must itself be allowed."""
        return self._sandbox.directory(self._path.parent)

    def exists(self) -> bool:
        """Return True when the entry exists inside the sandbox.

        Paths that no longer pass the whitelist report False.
        """
        if not self._sandbox.path_filter.is_whitelisted(self._path):
            ENTRY_LOGGER.warning(
                "Existence check outside sandbox",
                extra={
                    "event": "path_denied",
                    "path": self.path,
                    "operation": "exists",
                },
            )
            return False
        return self._path.exists()

    def _guard(self, operation: str) -> Path:
        return self._sandbox.path_filter.require_whitelisted(self._path, operation)

    @contextlib.contextmanager
    def _os_operation(self, operation: str) -> Iterator[None]:
        """Tag OS errors raised inside the block with the failing operation."""
        try:
            yield
        except OSError as error:
            error.add_note(f"scriptfs operation: {self.KIND}.{operation}")
            ENTRY_LOGGER.error(
                "Filesystem operation failed",
                extra={
                    "event": "os_error",
                    "operation": f"{self.KIND}.{operation}",
                    "path": self.path,
                    "error_type": type(error).__name__,
                },
            )
            raise
