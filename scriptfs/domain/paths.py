"""Pure path helpers: rendering, lexical absolutization and containment."""

import os
from pathlib import Path, PurePath
from typing import Optional, Union

from scriptfs.domain.errors import InvalidPath

PathLike = Union[str, PurePath]


def normalize(path: PathLike) -> str:
    """Render a platform path with forward slashes."""
    return str(path).replace("\\", "/")


def absolutize(path: PathLike, base: PathLike) -> Path:
    """Return ``path`` as an absolute path, resolving it against ``base``.

    ``.`` and ``..`` segments are collapsed lexically; symlinks are not
    followed, so the result says nothing about where the OS would land.
    """
    raw = str(path)
    if "\x00" in raw:
        raise InvalidPath(raw.replace("\x00", "\\0"), "embedded NUL byte")
    candidate = Path(raw)
    if not candidate.is_absolute():
        candidate = Path(base) / candidate
    return Path(os.path.normpath(candidate))


def has_final_component(path: PurePath) -> bool:
    """Return True when the path names something below its anchor."""
    return bool(path.name)


def is_within(path: PurePath, root: PurePath) -> bool:
    """Component-wise prefix test; a path is within itself."""
    return path == root or root in path.parents


def relative_between(base: PurePath, target: PurePath) -> Optional[str]:
    """Spell ``target`` relative to ``base`` using ``..`` where needed.

    Both paths must be absolute and of the same flavour. Returns None when
    they live under different anchors (e.g. different drives).
    """
    flavour = type(base)
    if flavour(base.anchor) != flavour(target.anchor):
        return None

    base_parts = base.parts[1:]
    target_parts = target.parts[1:]
    common = 0
    for base_part, target_part in zip(base_parts, target_parts):
        if flavour(base_part) != flavour(target_part):
            break
        common += 1

    segments = [".."] * (len(base_parts) - common)
    segments.extend(target_parts[common:])
    return "/".join(segments)
