from __future__ import annotations

import numpy as np
import pytest

from landmark_db.annotations import parse_pts_file
from landmark_db.core.config import ImportConfig
from landmark_db.core.constants import RECTANGLES_FILE
from landmark_db.geometry import create_rectangle, rect_to_xywh, shape_bounds
from landmark_db.pipeline import load_database
from landmark_db.visualization import draw_entry, save_visualizations, verify_database, verify_entry
from landmark_db.writers import export_database, write_pts_file


def test_write_pts_file_is_one_based(tmp_path):
    shape = np.array([[1, 3, 2], [1, 1, 3]], dtype=np.float32)
    path = tmp_path / "s.pts"
    write_pts_file(path, shape)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[:3] == ["version: 1", "n_points: 3", "{"]
    assert lines[3] == "2.000000 2.000000"
    assert lines[-1] == "}"
    np.testing.assert_allclose(parse_pts_file(path), shape)


def test_exported_database_imports_back(ibug_dir, tmp_path):
    config = ImportConfig(generate_vertically_mirrored=True, show_progress=False)
    database = load_database(str(ibug_dir), config=config)

    out = tmp_path / "export"
    count, rect_file = export_database(str(out), database.images, database.shapes,
                                       database.rects, show_progress=False)
    assert count == 6
    assert rect_file.endswith(RECTANGLES_FILE)

    reloaded = load_database(str(out), rect_file, config=ImportConfig(show_progress=False))
    assert len(reloaded) == 6
    for original, read in zip(database, reloaded):
        np.testing.assert_array_equal(read.image, original.image)
        np.testing.assert_allclose(read.shape, original.shape, atol=1e-4)
        # mirrored rects keep their column order, so compare extents
        np.testing.assert_allclose(rect_to_xywh(read.rect), rect_to_xywh(original.rect), atol=1e-4)


def test_export_rejects_misaligned_collections(tmp_path):
    with pytest.raises(ValueError):
        export_database(str(tmp_path), [np.zeros((2, 2), np.uint8)], [], [], show_progress=False)


def test_verify_entry_flags_points_outside_image():
    image = np.zeros((10, 20), np.uint8)
    inside = np.array([[0, 19], [0, 9]], np.float32)
    outside = np.array([[0, 20], [0, 9]], np.float32)

    assert verify_entry(image, inside, shape_bounds(inside)) == []
    issues = verify_entry(image, outside, shape_bounds(outside), name="e")
    assert len(issues) == 1 and issues[0].startswith("e: 1 landmarks")
    assert verify_database([image, image], [inside, outside],
                           [shape_bounds(inside), shape_bounds(outside)]) == 1


def test_draw_entry_and_save_overlays(tmp_path):
    image = np.zeros((30, 40), np.uint8)
    shape = np.array([[10, 20], [10, 15]], np.float32)
    rect = create_rectangle((5, 5), (25, 20))

    canvas = draw_entry(image, shape, rect)
    assert canvas.shape == (30, 40, 3)
    assert tuple(canvas[10, 10]) == (0, 255, 0)
    assert tuple(canvas[5, 15]) == (0, 0, 255)

    written = save_visualizations(str(tmp_path / "vis"), [image] * 3, [shape] * 3, [rect] * 3, max_count=2)
    assert written == 2
    assert sorted(p.name for p in (tmp_path / "vis").iterdir()) == ["overlay_0000.png", "overlay_0001.png"]
