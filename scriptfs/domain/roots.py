"""Discovery of the two permitted filesystem roots."""

import enum
import logging
import os
import threading
from pathlib import Path
from typing import Callable, Optional

import platformdirs

from scriptfs.bootstrap.config import SandboxConfig
from scriptfs.domain.caller import CallerLoggerAdapter
from scriptfs.domain.errors import SaveDataLocationUnresolvable
from scriptfs.domain.paths import absolutize

ROOTS_LOGGER = CallerLoggerAdapter(logging.getLogger("scriptfs.domain.roots"), {})


class Root(enum.Enum):
    """Which permitted tree a path belongs to."""

    INSTALLATION = "installation"
    SAVE_DATA = "save_data"


def _user_documents_dir() -> Optional[Path]:
    documents = platformdirs.user_documents_dir()
    return Path(documents) if documents else None


def is_save_data_location_valid(path: Path, marker_file_name: str) -> bool:
    """Return True when ``path`` holds the marker file; its content is ignored."""
    return (path / marker_file_name).exists()


class RootResolver:
    """Resolves the installation root and the memoized save data root.

    The save data root is searched for on first use and cached for the
    lifetime of the resolver. A failed search is not cached, so a later call
    repeats it.
    """

    def __init__(
        self,
        config: SandboxConfig,
        home_dir: Callable[[], Path] = Path.home,
        documents_dir: Callable[[], Optional[Path]] = _user_documents_dir,
    ) -> None:
        self._config = config
        self._home_dir = home_dir
        self._documents_dir = documents_dir
        self._lock = threading.Lock()
        self._save_data_root: Optional[Path] = None

    def installation_root(self) -> Path:
        """Return the absolutized installation root, recomputed on each call."""
        configured = self._config.installation_root
        if configured is None:
            return absolutize(os.getcwd(), os.sep)
        configured = Path(configured)
        if configured.is_absolute():
            return absolutize(configured, configured.anchor)
        return absolutize(configured, os.getcwd())

    def save_data_candidates(self) -> list[Path]:
        """Return candidate save data directories in search order."""
        candidates = []
        documents = self._documents_dir()
        if documents is not None:
            candidates.append(Path(documents) / self._config.documents_save_subpath)

        installation_root = self.installation_root()
        candidates.append(installation_root / self._config.compatibility_save_subpath)
        candidates.append(installation_root / self._config.fallback_save_subpath)
        return candidates

    def save_data_root(self) -> Path:
        """Return the save data root, searching for it on first use."""
        with self._lock:
            if self._save_data_root is not None:
                return self._save_data_root

            try:
                self._home_dir()
            except (RuntimeError, KeyError, OSError) as error:
                ROOTS_LOGGER.error(
                    "Home directory unavailable",
                    extra={"event": "home_dir_unavailable"},
                )
                raise SaveDataLocationUnresolvable(
                    "Couldn't retrieve valid home directory path from the "
                    "operating system"
                ) from error

            marker = self._config.marker_file_name
            for candidate in self.save_data_candidates():
                if is_save_data_location_valid(candidate, marker):
                    resolved = absolutize(candidate, self.installation_root())
                    self._save_data_root = resolved
                    ROOTS_LOGGER.info(
                        "Save data root resolved",
                        extra={
                            "event": "save_data_root_resolved",
                            "root": resolved.as_posix(),
                        },
                    )
                    return resolved
                if ROOTS_LOGGER.logger.isEnabledFor(logging.DEBUG):
                    ROOTS_LOGGER.debug(
                        "Save data candidate rejected",
                        extra={
                            "event": "save_data_candidate_rejected",
                            "candidate": candidate.as_posix(),
                            "marker": marker,
                        },
                    )

            ROOTS_LOGGER.warning(
                "No save data location found",
                extra={"event": "save_data_root_unresolved", "marker": marker},
            )
            raise SaveDataLocationUnresolvable(
                "Could not find a valid save data location"
            )
