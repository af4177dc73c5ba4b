"""Sandbox context: the entry point scripts use to reach the filesystem."""

from pathlib import Path
from typing import Optional

from scriptfs.bootstrap.config import SandboxConfig
from scriptfs.domain.directory import Directory
from scriptfs.domain.file import File
from scriptfs.domain.path_filter import PathFilter
from scriptfs.domain.paths import PathLike
from scriptfs.domain.roots import RootResolver


class Sandbox:
    """Holds both roots and vets every File/Directory it hands out.

    Build one at startup and pass it to whatever exposes filesystem access
    to scripts. Relative paths are taken relative to the installation root.
    """

    def __init__(
        self, config: SandboxConfig, resolver: Optional[RootResolver] = None
    ) -> None:
        self._config = config
        self._resolver = resolver if resolver is not None else RootResolver(config)
        self._path_filter = PathFilter(self._resolver)

    @property
    def config(self) -> SandboxConfig:
        return self._config

    @property
    def path_filter(self) -> PathFilter:
        return self._path_filter

    def installation_root(self) -> Path:
        return self._resolver.installation_root()

    def save_data_root(self) -> Path:
        return self._resolver.save_data_root()

    def is_whitelisted(self, path: PathLike) -> bool:
        return self._path_filter.is_whitelisted(path)

    def file(self, path: PathLike) -> File:
        """Return a File for ``path``; raises NotWhitelisted outside the roots."""
        target = self._path_filter.require_whitelisted(path, "file")
        return File(self, target)

    def directory(self, path: PathLike) -> Directory:
        """Return a Directory for ``path``; raises NotWhitelisted outside the roots."""
        target = self._path_filter.require_whitelisted(path, "directory")
        return Directory(self, target)

    def save_data_directory(self) -> Directory:
        """Return the save data root as a Directory."""
        return Directory(self, self._resolver.save_data_root())

    def installation_directory(self) -> Directory:
        """Return the installation root as a Directory."""
        return Directory(self, self._resolver.installation_root())
