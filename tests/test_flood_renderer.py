"""
Tests for the wave-clipped fill.
"""

import numpy as np
import pytest

from core.canvas import Canvas
from core.path_model import Size, VectorPath
from core.animation.flood_renderer import FloodRenderer, WaveParameters

MAGENTA = (255, 0, 255)
BOX = "M 0 0 L 100 0 L 100 100 L 0 100 Z"


@pytest.fixture
def renderer():
    return FloodRenderer(VectorPath.from_path_data(BOX), Size(100.0, 100.0),
                         stroke_duration_millis=2000, fill_duration_millis=8000,
                         fill_color=MAGENTA)


class TestFillProgress:
    """Test activation and the fill fraction."""

    def test_inactive_until_stroke_completes(self, renderer):
        assert not renderer.is_fill_active(0)
        assert not renderer.is_fill_active(2000)
        assert renderer.is_fill_active(2001)

    def test_fill_fraction(self, renderer):
        assert renderer.fill_fraction(2000) == 0.0
        assert renderer.fill_fraction(2001) == pytest.approx(0.000125)
        assert renderer.fill_fraction(6000) == pytest.approx(0.5)
        assert renderer.fill_fraction(10000) == 1.0
        assert renderer.fill_fraction(99999) == 1.0


class TestWaveClip:
    """Test the wave boundary geometry."""

    def test_edge_sampling(self, renderer):
        edge = renderer.wave_edge(0.5)
        assert edge.shape == (128, 2)
        assert edge[0, 0] == 0.0
        assert edge[-1, 0] == 100.0

    def test_edge_at_extremes_is_flat(self, renderer):
        np.testing.assert_allclose(renderer.wave_edge(0.0)[:, 1], 100.0)
        np.testing.assert_allclose(renderer.wave_edge(1.0)[:, 1], 0.0, atol=1e-9)

    def test_reveal_is_monotonic(self, renderer):
        """Every column's boundary only moves up as the fill advances."""
        edges = np.array([renderer.wave_edge(f)[:, 1] for f in np.linspace(0.0, 1.0, 201)])
        assert np.all(np.diff(edges, axis=0) <= 1e-9)

    def test_polygon_closes_along_bottom(self, renderer):
        polygon = renderer.wave_clip_polygon(0.3)
        assert len(polygon) == 130
        np.testing.assert_allclose(polygon[-2:], [[100.0, 100.0], [0.0, 100.0]])

    def test_custom_wave_parameters(self):
        renderer = FloodRenderer(VectorPath.from_path_data(BOX), Size(100.0, 100.0),
                                 wave=WaveParameters(sample_points=16, amplitude_ratio=0.0))
        edge = renderer.wave_edge(0.25)
        assert edge.shape == (16, 2)
        np.testing.assert_allclose(edge[:, 1], 75.0)


class TestFillDrawing:
    """Test the fill drawn onto a canvas."""

    def test_nothing_drawn_before_fill(self, renderer):
        canvas = Canvas(100, 100)
        assert renderer.draw_filling(canvas, 2000) == 0.0
        assert canvas.count_pixels(MAGENTA) == 0

    def test_partial_fill_from_bottom(self, renderer):
        canvas = Canvas(100, 100, antialias=False)
        fraction = renderer.draw_filling(canvas, 6000)
        assert fraction == pytest.approx(0.5)
        image = canvas.image
        # wave amplitude is at most 4% of the height around the midline
        assert tuple(image[95, 50]) == MAGENTA
        assert not np.any(np.all(image[:40] == MAGENTA, axis=2))

    def test_complete_fill(self, renderer):
        canvas = Canvas(100, 100, antialias=False)
        assert renderer.draw_filling(canvas, 10000) == 1.0
        assert tuple(canvas.image[5, 5]) == MAGENTA
        assert tuple(canvas.image[95, 95]) == MAGENTA

    def test_more_fill_over_time(self, renderer):
        counts = []
        for t in (3000, 5000, 7000, 9000):
            canvas = Canvas(100, 100, antialias=False)
            renderer.draw_filling(canvas, t)
            counts.append(canvas.count_pixels(MAGENTA))
        assert counts == sorted(counts)
        assert counts[0] > 0
