"""
Tests for the raster drawing surface.
"""

import numpy as np

from core.canvas import Canvas
from core.path_model import Polyline

RED = (255, 0, 0)
WHITE = (255, 255, 255)
SQUARE = np.array([[10.0, 10.0], [50.0, 10.0], [50.0, 50.0], [10.0, 50.0]])
FULL = np.array([[0.0, 0.0], [100.0, 0.0], [100.0, 100.0], [0.0, 100.0]])


class TestCanvasTransforms:
    """Test the translate/scale stack."""

    def test_transforms_compose_and_restore(self):
        canvas = Canvas(100, 100)
        with canvas.translate(10, 20), canvas.scale(2.0):
            np.testing.assert_allclose(canvas.transform_points([[1.0, 1.0]]), [[12.0, 22.0]])
            assert canvas.current_scale == 2.0
        np.testing.assert_allclose(canvas.matrix, np.eye(3))

    def test_restores_after_exception(self):
        canvas = Canvas(100, 100)
        try:
            with canvas.scale(3.0):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert canvas.current_scale == 1.0


class TestCanvasDrawing:
    """Test fills, strokes and clipping."""

    def test_new_canvas_is_background(self):
        canvas = Canvas(40, 30, background_color=(1, 2, 3))
        assert canvas.image.shape == (30, 40, 3)
        assert canvas.count_pixels((1, 2, 3)) == 40 * 30

    def test_fill_polygon(self):
        canvas = Canvas(100, 100)
        canvas.fill_polygons([SQUARE], RED)
        assert tuple(canvas.image[30, 30]) == RED
        assert tuple(canvas.image[70, 70]) == WHITE

    def test_fill_respects_transform(self):
        canvas = Canvas(100, 100)
        with canvas.translate(40, 40):
            canvas.fill_polygons([SQUARE], RED)
        assert tuple(canvas.image[30, 30]) == WHITE
        assert tuple(canvas.image[70, 70]) == RED

    def test_stroke_polyline(self):
        canvas = Canvas(100, 100, antialias=False)
        line = Polyline(np.array([[10.0, 50.0], [90.0, 50.0]]), False)
        canvas.stroke_polylines([line], RED, width=3.0)
        assert tuple(canvas.image[50, 50]) == RED
        assert tuple(canvas.image[20, 50]) == WHITE

    def test_stroke_width_scales(self):
        thin = Canvas(100, 100, antialias=False)
        thick = Canvas(100, 100, antialias=False)
        line = Polyline(np.array([[10.0, 25.0], [45.0, 25.0]]), False)
        thin.stroke_polylines([line], RED, width=1.0)
        with thick.scale(2.0):
            thick.stroke_polylines([line], RED, width=1.0)
        assert thick.count_pixels(RED) > 2 * thin.count_pixels(RED)

    def test_clip_limits_drawing(self):
        canvas = Canvas(100, 100, antialias=False)
        left_half = np.array([[0.0, 0.0], [50.0, 0.0], [50.0, 100.0], [0.0, 100.0]])
        with canvas.clip([left_half]):
            canvas.fill_polygons([FULL], RED)
        assert tuple(canvas.image[50, 20]) == RED
        assert tuple(canvas.image[50, 80]) == WHITE

        # clip is released after the block
        canvas.fill_polygons([FULL], RED)
        assert tuple(canvas.image[50, 80]) == RED

    def test_nested_clips_intersect(self):
        canvas = Canvas(100, 100, antialias=False)
        left_half = np.array([[0.0, 0.0], [50.0, 0.0], [50.0, 100.0], [0.0, 100.0]])
        top_half = np.array([[0.0, 0.0], [100.0, 0.0], [100.0, 50.0], [0.0, 50.0]])
        with canvas.clip([left_half]), canvas.clip([top_half]):
            canvas.fill_polygons([FULL], RED)
        assert tuple(canvas.image[20, 20]) == RED
        assert tuple(canvas.image[80, 20]) == WHITE
        assert tuple(canvas.image[20, 80]) == WHITE

    def test_clear(self):
        canvas = Canvas(50, 50)
        canvas.fill_polygons([FULL], RED)
        canvas.clear()
        assert canvas.count_pixels(WHITE) == 50 * 50

    def test_bgr_and_save(self, tmp_path):
        canvas = Canvas(20, 20, background_color=RED)
        assert tuple(canvas.to_bgr()[0, 0]) == (0, 0, 255)
        target = tmp_path / "out" / "frame.png"
        assert canvas.save_canvas(str(target))
        assert target.exists()
