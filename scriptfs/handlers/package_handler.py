"""Script-facing wrapper around the external archive (package) engine.

The engine itself is supplied by the host. It must provide ``new()``,
``read_from_path(path)`` and ``write_to_path(package, path)``; packages it
returns must provide ``add_entry``, ``put_entry``, ``remove_entry``,
``entry_exists``, ``content_by_path``, ``inner_paths``, ``entry_count``,
``extract`` and ``clear``. Every host path handed to the engine is vetted
against the sandbox first.
"""

import logging
import os
from typing import Any, Optional

from scriptfs.domain.caller import CallerLoggerAdapter
from scriptfs.domain.errors import Utf8DecodeError
from scriptfs.domain.file import Bytes
from scriptfs.domain.paths import absolutize, normalize
from scriptfs.domain.sandbox import Sandbox

PACKAGE_LOGGER = CallerLoggerAdapter(
    logging.getLogger("scriptfs.handlers.package"), {}
)


def read_package(sandbox: Sandbox, engine: Any, path: str) -> "PackageHandle":
    """Open the package stored at ``path``."""
    source = sandbox.path_filter.require_whitelisted(path, "read_package")
    package = engine.read_from_path(source)
    PACKAGE_LOGGER.info(
        "Package read",
        extra={"event": "package_read", "path": normalize(source)},
    )
    return PackageHandle(sandbox, engine, package)


def new_package(sandbox: Sandbox, engine: Any) -> "PackageHandle":
    """Create an empty package."""
    return PackageHandle(sandbox, engine, engine.new())


class PackageHandle:
    """One package as seen by scripts."""

    def __init__(self, sandbox: Sandbox, engine: Any, package: Any) -> None:
        self._sandbox = sandbox
        self._engine = engine
        self._package = package

    def to_file(self, path: str) -> None:
        target = self._sandbox.path_filter.require_whitelisted(path, "to_file")
        self._engine.write_to_path(self._package, target)
        PACKAGE_LOGGER.info(
            "Package written",
            extra={
                "event": "package_written",
                "path": normalize(target),
                "entries": self._package.entry_count(),
            },
        )

    def add_entry_from_string(self, inner_path: str, content: str) -> None:
        self._package.add_entry(inner_path, content.encode("utf-8"))

    def add_entry_from_byte_array(self, inner_path: str, content: Bytes) -> None:
        self._package.add_entry(inner_path, bytes(content))

    def add_entry_from_file(self, inner_path: str, source_path: str) -> None:
        self._package.add_entry(inner_path, self._read_source(source_path))

    def put_entry_from_string(self, inner_path: str, content: str) -> None:
        self._package.put_entry(inner_path, content.encode("utf-8"))

    def put_entry_from_byte_array(self, inner_path: str, content: Bytes) -> None:
        self._package.put_entry(inner_path, bytes(content))

    def put_entry_from_file(self, inner_path: str, source_path: str) -> None:
        self._package.put_entry(inner_path, self._read_source(source_path))

    def _read_source(self, source_path: str) -> bytes:
        return self._sandbox.file(source_path).read_to_byte_array()

    def read_content_as_string(self, inner_path: str) -> Optional[str]:
        content = self._package.content_by_path(inner_path)
        if content is None:
            return None
        try:
            return bytes(content).decode("utf-8")
        except UnicodeDecodeError as error:
            raise Utf8DecodeError(inner_path, error.reason) from error

    def read_content_as_byte_array(self, inner_path: str) -> Optional[bytes]:
        content = self._package.content_by_path(inner_path)
        return None if content is None else bytes(content)

    def remove(self, inner_path: str) -> bool:
        return self._package.remove_entry(inner_path)

    def exists(self, inner_path: str) -> bool:
        return self._package.entry_exists(inner_path)

    def clear(self) -> None:
        self._package.clear()

    def inner_paths(self) -> list[str]:
        return list(self._package.inner_paths())

    def entry_count(self) -> int:
        return self._package.entry_count()

    def len(self) -> int:
        """Alias of entry_count."""
        return self.entry_count()

    def extract(self, inner_path: str) -> None:
        """Write one entry to disk at its inner path.

        The engine writes relative to the process working directory, which
        need not be the installation root, so the landing path is vetted
        against the working directory.
        """
        landing = absolutize(inner_path, os.getcwd())
        target = self._sandbox.path_filter.require_whitelisted(landing, "extract")
        self._package.extract(inner_path)
        PACKAGE_LOGGER.info(
            "Package entry extracted",
            extra={"event": "package_entry_extracted", "path": normalize(target)},
        )
