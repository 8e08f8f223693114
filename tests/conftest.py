from __future__ import annotations

import sys
from pathlib import Path

import cv2
import numpy as np
import pytest


def _ensure_repo_root_first() -> Path:
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str in sys.path:
        sys.path.remove(repo_root_str)
    sys.path.insert(0, repo_root_str)
    return repo_root


_ensure_repo_root_first()


def _write_image(path: Path, width: int, height: int, value: int = 128) -> Path:
    img = np.full((height, width), value, dtype=np.uint8)
    # gradient so mirroring is observable
    img[:, : width // 2] = 30
    assert cv2.imwrite(str(path), img)
    return path


def _write_pts(path: Path, points) -> Path:
    """Write 1-based pts file from a list of (x, y)."""
    lines = ["version: 1", f"n_points:  {len(points)}", "{"]
    lines += [f"{x} {y}" for x, y in points]
    lines.append("}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def _write_asf(path: Path, points, image_name: str = "face.jpg") -> Path:
    """Write an IMM style asf file from normalized (x, y) fractions."""
    lines = [
        "######################################################################",
        "#",
        "#    AAM Shape File  -  written: Monday May 08 - 2000 [15:22]",
        "#",
        "######################################################################",
        "",
        "#",
        "# number of model points",
        "#",
        str(len(points)),
        "",
        "#",
        "# model points",
        "#",
        "# format: <path#> <type> <x rel.> <y rel.> <point#> <connects from> <connects to>",
        "#",
    ]
    for i, (x, y) in enumerate(points):
        lines.append(f"0\t0\t{x:.8f}\t{y:.8f} \t{i}\t{max(i - 1, 0)}\t{i + 1}")
    lines += ["", "#", "# host image", "#", image_name, ""]
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


@pytest.fixture
def write_image():
    return _write_image


@pytest.fixture
def write_pts():
    return _write_pts


@pytest.fixture
def write_asf():
    return _write_asf


IBUG_POINTS = [
    [(11, 21), (31, 21), (21, 41)],
    [(5, 5), (50, 10), (25, 45)],
    [(2, 3), (4, 5), (6, 7), (8, 9)],
]

IMM_POINTS = [
    [(0.25, 0.5), (0.75, 0.5), (0.5, 0.9)],
    [(0.1, 0.1), (0.9, 0.2), (0.5, 0.5)],
]


@pytest.fixture
def ibug_dir(tmp_path):
    """iBUG database with three 64x48 entries, one in a subdirectory."""
    root = tmp_path / "ibug"
    sub = root / "sub"
    sub.mkdir(parents=True)
    targets = [root / "a", root / "b", sub / "c"]
    for base, points in zip(targets, IBUG_POINTS):
        _write_pts(base.with_suffix(".pts"), points)
        _write_image(base.with_suffix(".jpg"), 64, 48)
    return root


@pytest.fixture
def imm_dir(tmp_path):
    """IMM database with two 80x60 entries."""
    root = tmp_path / "imm"
    root.mkdir()
    for name, points in zip(["01-1m", "02-1m"], IMM_POINTS):
        _write_asf(root / f"{name}.asf", points, image_name=f"{name}.jpg")
        _write_image(root / f"{name}.jpg", 80, 60)
    return root
