"""Whitelist decision for paths handed in by scripts."""

import logging
from pathlib import Path

from scriptfs.domain.caller import CallerLoggerAdapter
from scriptfs.domain.errors import NotWhitelisted, SaveDataLocationUnresolvable
from scriptfs.domain.paths import PathLike, absolutize, is_within
from scriptfs.domain.roots import Root, RootResolver

FILTER_LOGGER = CallerLoggerAdapter(
    logging.getLogger("scriptfs.domain.path_filter"), {}
)


class PathFilter:
    """Allows a path iff it is one of the two roots or lies below one.

    Containment is decided on the lexically absolutized path, component by
    component; symlinks are not resolved. Errors from root resolution
    propagate so that callers fail closed.
    """

    def __init__(self, resolver: RootResolver) -> None:
        self._resolver = resolver

    @property
    def resolver(self) -> RootResolver:
        return self._resolver

    def absolutize(self, path: PathLike) -> Path:
        """Absolutize ``path`` against the installation root."""
        return absolutize(path, self._resolver.installation_root())

    def is_whitelisted(self, path: PathLike) -> bool:
        """Return True when ``path`` lies within a permitted root."""
        target = self.absolutize(path)
        if is_within(target, self._resolver.installation_root()):
            return True
        return is_within(target, self._resolver.save_data_root())

    def require_whitelisted(self, path: PathLike, operation: str) -> Path:
        """Return the absolutized path or raise NotWhitelisted."""
        target = self.absolutize(path)
        if not self.is_whitelisted(target):
            FILTER_LOGGER.warning(
                "Path outside sandbox blocked",
                extra={
                    "event": "path_denied",
                    "path": target.as_posix(),
                    "operation": operation,
                },
            )
            raise NotWhitelisted(target, operation)
        return target

    def root_of(self, path: PathLike) -> tuple[Root, Path]:
        """Classify ``path`` by the root containing it.

        The installation root is checked first, so a save data root nested
        inside the installation directory classifies as installation.
        """
        target = self.absolutize(path)
        installation_root = self._resolver.installation_root()
        if is_within(target, installation_root):
            return Root.INSTALLATION, installation_root
        save_data_root = self._resolver.save_data_root()
        if is_within(target, save_data_root):
            return Root.SAVE_DATA, save_data_root
        raise NotWhitelisted(target, "root")

    def is_real_path_whitelisted(self, path: PathLike) -> bool:
        """Containment test after resolving symlinks on both sides.

        A missing save data root counts as not containing the path.
        """
        real_target = Path(path).resolve()
        installation_root = self._resolver.installation_root()
        if is_within(real_target, installation_root.resolve()):
            return True
        try:
            save_data_root = self._resolver.save_data_root()
        except SaveDataLocationUnresolvable:
            return False
        return is_within(real_target, save_data_root.resolve())
