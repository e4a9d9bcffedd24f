"""Shared fixtures: a recording process runner and a fake memory card."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

import pytest
from PIL import Image

from photoimporter.core.config import ImportPolicy
from photoimporter.engines.process import ProcessOutput


THUMBNAIL_BYTES = b"\xff\xd8\xff\xe0fake-thumbnail\xff\xd9"


@dataclass
class FakeProcessRunner:
    """ProcessRunner double that records every invocation.

    Args:
        returncode: Exit status returned by every run.
        stdout: Captured stdout returned by every run.
        on_run: Called with the argument list before returning, e.g. to
            write the files a real tool would produce.
        error: Raised instead of running, to emulate a missing executable.
    """
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    on_run: Optional[Callable[[list[str]], None]] = None
    error: Optional[OSError] = None
    calls: list[list[str]] = field(default_factory=list)

    def run(
        self,
        executable: Union[str, Path],
        args: Sequence[str],
        cwd: Optional[Path] = None,
    ) -> ProcessOutput:
        self.calls.append([str(executable), *args])
        if self.error is not None:
            raise self.error
        if self.on_run is not None:
            self.on_run(list(args))
        return ProcessOutput(self.returncode, self.stdout, self.stderr)


def write_thumbnail(args: list[str]) -> None:
    """Emulate `exiftool -thumbnailimage -b -w TEMPLATE SOURCE`."""
    template, source = args[3], Path(args[4])
    target = Path(template.replace("%f", source.stem).replace("%%", "%"))
    target.write_bytes(THUMBNAIL_BYTES)


@pytest.fixture
def fake_runner() -> FakeProcessRunner:
    return FakeProcessRunner()


@pytest.fixture
def thumbnail_runner() -> FakeProcessRunner:
    """Runner that writes a thumbnail file like exiftool does."""
    return FakeProcessRunner(on_run=write_thumbnail)


@pytest.fixture
def card(tmp_path: Path) -> Path:
    """A memory card layout with raw files, video, junk and hidden entries."""
    root = tmp_path / "card"
    dcim = root / "DCIM" / "100CANON"
    dcim.mkdir(parents=True)

    (dcim / "IMG_0001.CR2").write_bytes(b"raw-one" * 10)
    (dcim / "IMG_0002.cr2").write_bytes(b"raw-two" * 20)
    (dcim / "MVI_0003.MP4").write_bytes(b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 32)
    (dcim / "notes.txt").write_text("not media")
    (dcim / "._IMG_0001.CR2").write_bytes(b"resource fork")

    hidden = root / ".Trashes"
    hidden.mkdir()
    (hidden / "IMG_9999.CR2").write_bytes(b"deleted")

    (root / "MISC").mkdir()
    (root / "MISC" / "empty.dng").write_bytes(b"")

    return root


@pytest.fixture
def jpeg_source(tmp_path: Path) -> Path:
    """A real JPEG image with a raw-style extension."""
    path = tmp_path / "src" / "IMG_1000.dng"
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", (32, 24), color="red").save(path, "JPEG")
    return path


@pytest.fixture
def make_policy(tmp_path: Path) -> Callable[..., ImportPolicy]:
    """Build an ImportPolicy with the destination under tmp_path."""
    def factory(**overrides) -> ImportPolicy:
        values = {"destination_root": tmp_path / "library"}
        values.update(overrides)
        return ImportPolicy(**values)
    return factory
