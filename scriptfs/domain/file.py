"""Sandboxed file values."""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Union

from scriptfs.domain.caller import CallerLoggerAdapter
from scriptfs.domain.errors import NotFound, Utf8DecodeError
from scriptfs.domain.located import Located
from scriptfs.domain.paths import PathLike, normalize

FILE_LOGGER = CallerLoggerAdapter(logging.getLogger("scriptfs.domain.file"), {})

Bytes = Union[bytes, bytearray, memoryview, list[int]]


class File(Located):
    """A single file inside the sandbox."""

    KIND = "file"

    __slots__ = ()

    @property
    def name_without_extension(self) -> str:
        return self._path.stem

    @property
    def extension(self) -> Optional[str]:
        """The text after the last dot of the name, or None without one."""
        suffix = self._path.suffix
        return suffix[1:] if suffix else None

    def read_to_byte_array(self) -> bytes:
        self._guard("read_to_byte_array")
        if not self._path.exists():
            raise NotFound(self._path)
        with self._os_operation("read_to_byte_array"):
            content = self._path.read_bytes()
        if FILE_LOGGER.logger.isEnabledFor(logging.DEBUG):
            FILE_LOGGER.debug(
                "File read",
                extra={"event": "file_read", "path": self.path, "bytes": len(content)},
            )
        return content

    def read_to_string(self) -> str:
        content = self.read_to_byte_array()
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError as error:
            raise Utf8DecodeError(self.path, error.reason) from error

    def write_byte_array(self, content: Bytes) -> None:
        """Overwrite the file, creating missing parent directories first."""
        self._write(bytes(content), "write_byte_array")

    def write_string(self, content: str) -> None:
        """Overwrite the file with UTF-8 text, creating parents first."""
        self._write(content.encode("utf-8"), "write_string")

    def _write(self, content: bytes, operation: str) -> None:
        self._guard(operation)
        with self._os_operation(operation):
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_bytes(content)
        FILE_LOGGER.info(
            "File written",
            extra={
                "event": "file_written",
                "path": self.path,
                "operation": operation,
                "bytes": len(content),
            },
        )

    def append_string(self, content: str) -> None:
        """Append UTF-8 text, creating the file and its parents if absent."""
        self._guard("append_string")
        encoded = content.encode("utf-8")
        with self._os_operation("append_string"):
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "ab") as file_handle:
                file_handle.write(encoded)
        FILE_LOGGER.info(
            "File appended",
            extra={"event": "file_appended", "path": self.path, "bytes": len(encoded)},
        )

    def copy(self, destination: PathLike) -> None:
        """Copy content and permission bits to ``destination``.

        Relative destinations are taken relative to the installation root.
        """
        target = self._prepare_destination(destination, "copy")
        with self._os_operation("copy"):
            shutil.copyfile(self._path, target)
            shutil.copymode(self._path, target)
        FILE_LOGGER.info(
            "File copied",
            extra={
                "event": "file_copied",
                "path": self.path,
                "destination": normalize(target),
            },
        )

    def move_file(self, destination: PathLike) -> None:
        """Move to ``destination``, replacing a file already there."""
        target = self._prepare_destination(destination, "move")
        with self._os_operation("move"):
            os.replace(self._path, target)
        FILE_LOGGER.info(
            "File moved",
            extra={
                "event": "file_moved",
                "path": self.path,
                "destination": normalize(target),
            },
        )

    def _prepare_destination(self, destination: PathLike, operation: str) -> Path:
        """Vet source and destination, then create the destination's parents."""
        self._guard(operation)
        path_filter = self._sandbox.path_filter
        target = path_filter.require_whitelisted(destination, f"{operation} destination")
        if not self._path.exists():
            raise NotFound(self._path)
        with self._os_operation(operation):
            target.parent.mkdir(parents=True, exist_ok=True)
        return target

    def delete(self) -> None:
        """Delete the file; a missing file is a no-op."""
        self._guard("delete")
        if not self._path.exists():
            return
        with self._os_operation("delete"):
            self._path.unlink()
        FILE_LOGGER.info(
            "File deleted", extra={"event": "file_deleted", "path": self.path}
        )
