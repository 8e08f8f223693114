from __future__ import annotations

import numpy as np
import pytest

from conftest import IBUG_POINTS, IMM_POINTS
from landmark_db.core.config import ImportConfig
from landmark_db.core.constants import DatabaseFormat
from landmark_db.core.exceptions import DatabaseImportError
from landmark_db.geometry import create_rectangle, shape_bounds
from landmark_db.io import export_rectangles
from landmark_db.pipeline import (
    detect_database_format,
    import_database,
    import_ibug_face_database,
    load_database,
)

QUIET = ImportConfig(show_progress=False)


def _run(directory, rectangle_file=None, config=QUIET, initial=0):
    images = [np.zeros((1, 1), np.uint8)] * initial
    shapes = [np.zeros((2, 1), np.float32)] * initial
    rects = [np.zeros((2, 4), np.float32)] * initial
    ok = import_database(str(directory), rectangle_file, images, shapes, rects, config)
    return ok, images, shapes, rects


def test_detects_dialects(ibug_dir, imm_dir, tmp_path):
    assert detect_database_format(ibug_dir) is DatabaseFormat.IBUG
    assert detect_database_format(imm_dir) is DatabaseFormat.IMM
    assert detect_database_format(tmp_path / "empty") is None


def test_imports_ibug_database(ibug_dir):
    ok, images, shapes, rects = _run(ibug_dir)
    assert ok
    assert len(images) == len(shapes) == len(rects) == 3
    for image, shape, rect, points in zip(images, shapes, rects, IBUG_POINTS):
        assert image.shape == (48, 64)
        assert image.ndim == 2
        expected = np.array(points, dtype=np.float32).T - 1.0
        np.testing.assert_allclose(shape, expected)
        np.testing.assert_allclose(rect, shape_bounds(shape))


def test_imports_imm_database_denormalized(imm_dir):
    ok, images, shapes, rects = _run(imm_dir)
    assert ok
    assert len(images) == len(shapes) == len(rects) == 2
    for image, shape, points in zip(images, shapes, IMM_POINTS):
        height, width = image.shape
        expected = np.array(points, dtype=np.float32).T * np.array([[width], [height]], dtype=np.float32)
        np.testing.assert_allclose(shape, expected, rtol=1e-5)
        assert np.all(shape[0] >= 0) and np.all(shape[0] < width)
        assert np.all(shape[1] >= 0) and np.all(shape[1] < height)


def test_unknown_format_leaves_outputs_untouched(tmp_path):
    (tmp_path / "readme.txt").write_text("nothing here")
    ok, images, shapes, rects = _run(tmp_path, initial=2)
    assert not ok
    assert len(images) == len(shapes) == len(rects) == 2


def test_rectangle_count_mismatch_aborts(tmp_path, write_pts, write_image):
    for i in range(5):
        write_pts(tmp_path / f"f{i}.pts", [(1, 1), (5, 5)])
        write_image(tmp_path / f"f{i}.jpg", 20, 20)
    rect_file = export_rectangles(tmp_path / "rects.txt",
                                  [create_rectangle((0, 0), (10, 10))] * 3)

    ok, images, shapes, rects = _run(tmp_path, rect_file, initial=1)
    assert not ok
    assert len(images) == len(shapes) == len(rects) == 1


def test_external_rectangles_are_paired_by_position(ibug_dir, tmp_path):
    loaded = [create_rectangle((i, i), (10 + i, 20 + i)) for i in range(3)]
    rect_file = export_rectangles(tmp_path / "rects.txt", loaded)

    ok, _, _, rects = _run(ibug_dir, rect_file)
    assert ok
    for got, expected in zip(rects, loaded):
        np.testing.assert_allclose(got, expected, atol=1e-5)


def test_malformed_rectangle_file_aborts(ibug_dir, tmp_path):
    rect_file = tmp_path / "rects.txt"
    rect_file.write_text("3\n1 2 3\n", encoding="utf-8")
    ok, images, _, _ = _run(ibug_dir, str(rect_file))
    assert not ok
    assert images == []


def test_corrupt_annotation_is_skipped(ibug_dir):
    (ibug_dir / "b.pts").write_text("version: 1\nn_points: 10\n{\n1 1\n", encoding="utf-8")
    ok, images, shapes, rects = _run(ibug_dir)
    assert ok
    assert len(images) == len(shapes) == len(rects) == 2


def test_missing_or_undecodable_image_is_skipped(ibug_dir):
    (ibug_dir / "a.jpg").unlink()
    (ibug_dir / "b.jpg").write_bytes(b"not an image")
    ok, images, shapes, rects = _run(ibug_dir)
    assert ok
    assert len(images) == len(shapes) == len(rects) == 1
    np.testing.assert_allclose(shapes[0], np.array(IBUG_POINTS[2], np.float32).T - 1.0)


def test_all_candidates_failing_is_soft_failure(tmp_path, write_pts):
    write_pts(tmp_path / "only.pts", [(1, 1)])
    ok, images, shapes, rects = _run(tmp_path, initial=3)
    assert ok is False
    assert len(images) == len(shapes) == len(rects) == 3


def test_image_extension_fallback(tmp_path, write_pts, write_image):
    write_pts(tmp_path / "x.pts", [(1, 1), (3, 3)])
    write_image(tmp_path / "x.png", 10, 10)
    ok, images, _, _ = _run(tmp_path)
    assert ok
    assert images[0].shape == (10, 10)

    ok, _, _, _ = _run(tmp_path, config=ImportConfig(image_extensions=('.jpg',), show_progress=False))
    assert not ok


def test_scaling_applies_to_image_shape_and_rect(tmp_path, write_pts, write_image):
    write_pts(tmp_path / "big.pts", [(11, 21), (101, 81)])
    write_image(tmp_path / "big.jpg", 200, 100)
    config = ImportConfig(max_image_side_length=100, show_progress=False)

    ok, images, shapes, rects = _run(tmp_path, config=config)
    assert ok
    assert images[0].shape == (50, 100)
    np.testing.assert_allclose(shapes[0], [[5, 50], [10, 40]])
    np.testing.assert_allclose(rects[0], shape_bounds(np.array([[5, 50], [10, 40]], np.float32)))


def test_mirrored_entries_follow_their_source(ibug_dir, tmp_path):
    rect_file = export_rectangles(tmp_path / "rects.txt",
                                  [create_rectangle((1, 2), (30, 40))] * 3)
    config = ImportConfig(generate_vertically_mirrored=True, show_progress=False)
    images, shapes, rects = [], [], []

    ok = import_ibug_face_database(str(ibug_dir), rect_file, images, shapes, rects, config)
    assert ok
    assert len(images) == len(shapes) == len(rects) == 6

    for i in range(0, 6, 2):
        width = images[i].shape[1]
        np.testing.assert_array_equal(images[i + 1], images[i][:, ::-1])
        np.testing.assert_allclose(shapes[i + 1][0], width - 1 - shapes[i][0])
        np.testing.assert_allclose(shapes[i + 1][1], shapes[i][1])
        np.testing.assert_allclose(rects[i + 1][0], width - 1 - rects[i][0], atol=1e-5)
        assert rects[i + 1].shape == (2, 4)


def test_both_extensions_prefers_imm(imm_dir, write_pts, write_image):
    write_pts(imm_dir / "extra.pts", [(1, 1)])
    write_image(imm_dir / "extra.jpg", 80, 60)
    assert detect_database_format(imm_dir) is DatabaseFormat.IMM

    ok, images, shapes, _ = _run(imm_dir)
    assert ok
    assert len(shapes) == 2


def test_both_extensions_rejected_when_configured(imm_dir, write_pts):
    write_pts(imm_dir / "extra.pts", [(1, 1)])
    config = ImportConfig(reject_ambiguous_format=True, show_progress=False)
    assert detect_database_format(imm_dir, config) is None
    ok, images, _, _ = _run(imm_dir, config=config)
    assert not ok
    assert images == []


def test_appends_after_existing_entries(ibug_dir):
    ok, images, shapes, rects = _run(ibug_dir, initial=2)
    assert ok
    assert len(images) == len(shapes) == len(rects) == 5


def test_load_database(ibug_dir, tmp_path):
    database = load_database(str(ibug_dir), config=QUIET)
    assert len(database) == 3
    entry = database[2]
    assert entry.num_landmarks == 4
    assert [e.width for e in database] == [64, 64, 64]

    with pytest.raises(DatabaseImportError):
        load_database(str(tmp_path / "nothing"), config=QUIET)


def test_upper_case_annotation_suffix_is_imported(tmp_path, write_pts, write_image):
    write_pts(tmp_path / "A.PTS", [(2, 2), (8, 6)])
    write_image(tmp_path / "A.jpg", 20, 20)

    assert detect_database_format(tmp_path) is DatabaseFormat.IBUG
    ok, images, shapes, rects = _run(tmp_path)
    assert ok
    assert len(images) == len(shapes) == len(rects) == 1
    np.testing.assert_allclose(shapes[0], [[1, 7], [1, 5]])


def test_image_scaling_to_zero_size_is_skipped(tmp_path, write_pts, write_image):
    write_pts(tmp_path / "a_good.pts", [(2, 2), (20, 20)])
    write_image(tmp_path / "a_good.jpg", 20, 20)
    write_pts(tmp_path / "b_thin.pts", [(1, 1), (500, 1)])
    write_image(tmp_path / "b_thin.jpg", 1000, 1)
    write_pts(tmp_path / "c_good.pts", [(3, 3), (9, 9)])
    write_image(tmp_path / "c_good.jpg", 20, 20)
    config = ImportConfig(max_image_side_length=10, show_progress=False)

    ok, images, shapes, rects = _run(tmp_path, config=config)
    assert ok
    assert len(images) == len(shapes) == len(rects) == 2
    assert [image.shape for image in images] == [(10, 10), (10, 10)]
    np.testing.assert_allclose(shapes[1], [[1, 4], [1, 4]])


def test_imm_scaling_and_mirroring_follow_denormalization(imm_dir):
    config = ImportConfig(max_image_side_length=40, generate_vertically_mirrored=True,
                          show_progress=False)
    ok, images, shapes, rects = _run(imm_dir, config=config)
    assert ok
    assert len(images) == len(shapes) == len(rects) == 4

    for i, points in enumerate(IMM_POINTS):
        source, mirrored = 2 * i, 2 * i + 1
        assert images[source].shape == (30, 40)
        expected = np.array(points, dtype=np.float32).T * np.array([[40], [30]], dtype=np.float32)
        np.testing.assert_allclose(shapes[source], expected, rtol=1e-5)
        np.testing.assert_allclose(rects[source], shape_bounds(expected), rtol=1e-5)

        np.testing.assert_array_equal(images[mirrored], images[source][:, ::-1])
        np.testing.assert_allclose(shapes[mirrored][0], 39 - expected[0], rtol=1e-5)
        np.testing.assert_allclose(shapes[mirrored][1], expected[1], rtol=1e-5)
        np.testing.assert_allclose(rects[mirrored][0], 39 - rects[source][0], rtol=1e-5)
