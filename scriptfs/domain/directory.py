"""Sandboxed directory values."""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional

from scriptfs.domain.caller import CallerLoggerAdapter
from scriptfs.domain.errors import NotAbsolutePath, NotFound
from scriptfs.domain.file import File
from scriptfs.domain.located import Located
from scriptfs.domain.paths import PathLike, is_within, normalize, relative_between

DIRECTORY_LOGGER = CallerLoggerAdapter(
    logging.getLogger("scriptfs.domain.directory"), {}
)


class Directory(Located):
    """A directory inside the sandbox; its path renders with a trailing slash."""

    TRAILER = "/"
    KIND = "directory"

    __slots__ = ()

    def file(self, *segments: str) -> File:
        """Return the file at ``segments`` below this directory."""
        return self._sandbox.file(self._path.joinpath(*segments))

    def directory(self, *segments: str) -> "Directory":
        """Return the directory at ``segments`` below this directory."""
        return self._sandbox.directory(self._path.joinpath(*segments))

    def files(self) -> list[File]:
        """List the files directly inside this directory."""
        return [
            File(self._sandbox, child)
            for child in self._children("files", want_directories=False)
        ]

    def directories(self) -> list["Directory"]:
        """List the directories directly inside this directory."""
        return [
            Directory(self._sandbox, child)
            for child in self._children("directories", want_directories=True)
        ]

    def _children(self, operation: str, want_directories: bool) -> list[Path]:
        """Snapshot immediate children of one kind, following symlinks.

        A symlinked child whose target resolves outside the sandbox is left
        out of the listing.
        """
        self._guard(operation)
        if not self._path.is_dir():
            raise NotFound(self._path, "Directory")

        children = []
        with self._os_operation(operation):
            with os.scandir(self._path) as entries:
                for entry in entries:
                    if want_directories:
                        matches = entry.is_dir(follow_symlinks=True)
                    else:
                        matches = entry.is_file(follow_symlinks=True)
                    if not matches:
                        continue
                    child = Path(entry.path)
                    if entry.is_symlink() and not (
                        self._sandbox.path_filter.is_real_path_whitelisted(child)
                    ):
                        DIRECTORY_LOGGER.warning(
                            "Symlink escaping sandbox omitted from listing",
                            extra={
                                "event": "symlink_escape_omitted",
                                "path": normalize(child),
                                "operation": operation,
                            },
                        )
                        continue
                    children.append(child)

        children.sort()
        if DIRECTORY_LOGGER.logger.isEnabledFor(logging.DEBUG):
            DIRECTORY_LOGGER.debug(
                "Directory listed",
                extra={
                    "event": "directory_listed",
                    "path": self.path,
                    "operation": operation,
                    "entries": len(children),
                },
            )
        return children

    def make_directories(self) -> None:
        """Create this directory and any missing ancestors."""
        self._guard("make_directories")
        with self._os_operation("make_directories"):
            self._path.mkdir(parents=True, exist_ok=True)
        DIRECTORY_LOGGER.info(
            "Directories created",
            extra={"event": "directories_created", "path": self.path},
        )

    def relativize(self, path: PathLike) -> Optional[str]:
        """Spell ``path`` relative to this directory.

        Relative arguments are taken relative to the installation root. A
        trailing slash is added when the target is a directory on disk.
        Returns None when the two paths share no anchor.
        """
        target = self._sandbox.path_filter.absolutize(path)
        relative = relative_between(self._path, target)
        if relative is None:
            return None
        if relative and target.is_dir():
            return relative + "/"
        return relative

    def is_ancestor(self, path: PathLike) -> bool:
        """Return True when the absolute ``path`` lies at or below this directory."""
        candidate = Path(path)
        if not candidate.is_absolute():
            raise NotAbsolutePath(path)
        return is_within(Path(os.path.normpath(candidate)), self._path)

    def delete(self) -> None:
        """Delete this directory recursively; a missing directory is a no-op."""
        self._guard("delete")
        if not self._path.exists():
            return
        with self._os_operation("delete"):
            shutil.rmtree(self._path)
        DIRECTORY_LOGGER.info(
            "Directory deleted",
            extra={"event": "directory_deleted", "path": self.path},
        )
