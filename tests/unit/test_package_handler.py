"""Unit tests for the gated archive handler."""

from pathlib import Path
from typing import Optional, TYPE_CHECKING

import pytest

from scriptfs.domain.errors import NotWhitelisted, Utf8DecodeError
from scriptfs.domain.sandbox import Sandbox
from scriptfs.handlers.package_handler import PackageHandle, new_package, read_package

if TYPE_CHECKING:
    from tests.conftest import SandboxLayout


class FakePackage:
    """In-memory stand-in for an engine package."""

    def __init__(self, entries: Optional[dict[str, bytes]] = None) -> None:
        self.entries = dict(entries or {})
        self.extracted: list[str] = []

    def add_entry(self, path: str, content: bytes) -> None:
        if path in self.entries:
            raise ValueError(f"entry already exists: {path}")
        self.entries[path] = content

    def put_entry(self, path: str, content: bytes) -> None:
        self.entries[path] = content

    def remove_entry(self, path: str) -> bool:
        return self.entries.pop(path, None) is not None

    def entry_exists(self, path: str) -> bool:
        return path in self.entries

    def content_by_path(self, path: str) -> Optional[bytes]:
        return self.entries.get(path)

    def inner_paths(self) -> list[str]:
        return sorted(self.entries)

    def entry_count(self) -> int:
        return len(self.entries)

    def extract(self, path: str) -> None:
        self.extracted.append(path)

    def clear(self) -> None:
        self.entries.clear()


class FakeEngine:
    """Records the host paths the handler passes through."""

    def __init__(self) -> None:
        self.stored: dict[Path, FakePackage] = {}

    def new(self) -> FakePackage:
        return FakePackage()

    def read_from_path(self, path: Path) -> FakePackage:
        return self.stored[path]

    def write_to_path(self, package: FakePackage, path: Path) -> None:
        self.stored[path] = FakePackage(package.entries)


@pytest.fixture(name="engine")
def engine_fixture() -> FakeEngine:
    """A fresh fake engine."""
    return FakeEngine()


@pytest.fixture(name="package")
def package_fixture(sandbox: Sandbox, engine: FakeEngine) -> PackageHandle:
    """An empty package handle."""
    return new_package(sandbox, engine)


def test_entries_from_strings_and_bytes(package: PackageHandle) -> None:
    """Added entries can be read back in either form."""
    package.add_entry_from_string("img/a.txt", "hello")
    package.add_entry_from_byte_array("img/b.bin", [1, 2, 3])

    assert package.read_content_as_string("img/a.txt") == "hello"
    assert package.read_content_as_byte_array("img/b.bin") == b"\x01\x02\x03"
    assert package.entry_count() == 2
    assert package.inner_paths() == ["img/a.txt", "img/b.bin"]


def test_add_existing_entry_fails_put_overwrites(package: PackageHandle) -> None:
    """add refuses duplicates while put upserts."""
    package.add_entry_from_string("a.txt", "one")
    with pytest.raises(ValueError):
        package.add_entry_from_string("a.txt", "two")

    package.put_entry_from_string("a.txt", "two")
    package.put_entry_from_byte_array("b.txt", b"three")
    assert package.read_content_as_string("a.txt") == "two"
    assert package.read_content_as_string("b.txt") == "three"


def test_missing_entry_reads_none(package: PackageHandle) -> None:
    """Absent entries read as None."""
    assert package.read_content_as_string("missing") is None
    assert package.read_content_as_byte_array("missing") is None


def test_invalid_utf8_entry(package: PackageHandle) -> None:
    """Binary entries cannot be read as text."""
    package.put_entry_from_byte_array("bin", b"\xff\xfe")
    with pytest.raises(Utf8DecodeError):
        package.read_content_as_string("bin")


def test_remove_exists_clear(package: PackageHandle) -> None:
    """Entry bookkeeping is delegated to the engine package."""
    package.put_entry_from_string("a.txt", "x")
    assert package.exists("a.txt")
    assert package.remove("a.txt") is True
    assert package.remove("a.txt") is False
    package.put_entry_from_string("b.txt", "y")
    package.clear()
    assert package.entry_count() == 0


def test_entry_from_sandboxed_file(package: PackageHandle, sandbox: Sandbox) -> None:
    """Source files are read through the sandbox."""
    sandbox.file("mods/init.lua").write_string("return {}")

    package.add_entry_from_file("scripts/init.lua", "mods/init.lua")
    package.put_entry_from_file("scripts/copy.lua", "mods/init.lua")

    assert package.read_content_as_string("scripts/init.lua") == "return {}"
    assert package.read_content_as_string("scripts/copy.lua") == "return {}"


def test_entry_from_file_outside_sandbox(
    package: PackageHandle, layout: "SandboxLayout"
) -> None:
    """Source files outside the roots are refused."""
    secret = layout["outside"] / "secret.txt"
    secret.write_text("secret")

    with pytest.raises(NotWhitelisted):
        package.add_entry_from_file("leak.txt", str(secret))
    assert package.entry_count() == 0


def test_write_and_read_back(
    sandbox: Sandbox, engine: FakeEngine, package: PackageHandle, layout: "SandboxLayout"
) -> None:
    """Packages round-trip through sandboxed host paths."""
    package.put_entry_from_string("a.txt", "x")
    package.to_file("resources/resource.dat")

    target = layout["installation"] / "resources" / "resource.dat"
    assert target in engine.stored

    reopened = read_package(sandbox, engine, "resources/resource.dat")
    assert reopened.read_content_as_string("a.txt") == "x"


def test_write_outside_sandbox(
    engine: FakeEngine, package: PackageHandle, layout: "SandboxLayout"
) -> None:
    """Packages cannot be written outside the roots."""
    with pytest.raises(NotWhitelisted):
        package.to_file(str(layout["outside"] / "resource.dat"))
    assert engine.stored == {}


def test_read_outside_sandbox(
    sandbox: Sandbox, engine: FakeEngine, layout: "SandboxLayout"
) -> None:
    """Packages cannot be opened outside the roots."""
    with pytest.raises(NotWhitelisted):
        read_package(sandbox, engine, str(layout["outside"] / "resource.dat"))


def test_extract_is_vetted(
    package: PackageHandle, layout: "SandboxLayout", monkeypatch: pytest.MonkeyPatch
) -> None:
    """Extraction targets must land inside the sandbox."""
    monkeypatch.chdir(layout["installation"])
    package.put_entry_from_string("img/a.png", "x")
    package.extract("img/a.png")

    with pytest.raises(NotWhitelisted):
        package.extract("../../outside/a.png")

    assert package._package.extracted == ["img/a.png"]  # pylint: disable=protected-access


def test_extract_vets_working_directory_landing(
    package: PackageHandle, layout: "SandboxLayout", monkeypatch: pytest.MonkeyPatch
) -> None:
    """Entries land relative to the working directory, not the installation root."""
    monkeypatch.chdir(layout["outside"])
    package.put_entry_from_string("img/a.png", "x")

    with pytest.raises(NotWhitelisted):
        package.extract("img/a.png")

    monkeypatch.chdir(layout["save_data"])
    package.extract("img/a.png")

    assert package._package.extracted == ["img/a.png"]  # pylint: disable=protected-access


def test_len_matches_entry_count(package: PackageHandle) -> None:
    """len is an alias of entry_count."""
    package.put_entry_from_string("a.txt", "x")
    package.put_entry_from_string("b.txt", "y")

    assert package.len() == package.entry_count() == 2
