from __future__ import annotations

from pathlib import Path

import pytest

from randompic.config import Settings


def write_file(path: Path, payload: bytes = b"") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(payload)
    return path


@pytest.fixture
def photo_root(tmp_path: Path) -> Path:
    root = tmp_path / "photos"
    write_file(root / "a.jpg", b"jpeg-a")
    write_file(root / "2023" / "b.PNG", b"png-b")
    write_file(root / "2023" / "clip.MOV", b"movie")
    write_file(root / ".hidden.jpg", b"hidden")
    write_file(root / "recycle" / "c.jpg", b"jpeg-c")
    return root


@pytest.fixture
def settings(photo_root: Path) -> Settings:
    return Settings(
        image_directory=str(photo_root),
        excluded_extensions=[".mov"],
        excluded_directories=["recycle"],
        display_seconds=5,
        log_file="",
    )
