"""
Tests for offline export of the loader animation.
"""

import numpy as np
import pytest
from PIL import Image

from core.animation.animation_controller import FillableLoader
from core.animation.animation_renderer import (
    AnimationRenderer,
    FrameSink,
    GifSink,
    RenderConfig,
    RenderFormat,
)


def short_loader():
    return FillableLoader(stroke_duration_millis=200, fill_duration_millis=300)


class RecordingSink(FrameSink):
    """Keeps only frame shapes and identities of the frames it receives."""

    def __init__(self, config):
        super().__init__(config)
        self.shapes = []
        self.ids = []
        self.closed_with = None

    def open(self):
        pass

    def _write(self, frame):
        self.shapes.append(frame.shape)
        self.ids.append(id(frame))

    def close(self, finalize=True):
        self.closed_with = finalize


@pytest.fixture
def recording_sinks(monkeypatch):
    """Replace every output format with a recording sink."""
    created = []

    def factory(config):
        sink = RecordingSink(config)
        created.append(sink)
        return sink

    from core.animation import animation_renderer
    monkeypatch.setattr(animation_renderer, 'FRAME_SINKS',
                        {fmt: factory for fmt in RenderFormat})
    return created


class TestFrameStreaming:
    """Test that frames go to the output as they are produced."""

    def test_frame_count(self, tmp_path):
        loader = short_loader()
        output = tmp_path / "frames"
        config = RenderConfig(output_path=str(output), format=RenderFormat.FRAMES, fps=20,
                              resolution=(60, 60), hold_last_frame_millis=100,
                              show_progress=False)
        result = AnimationRenderer().render(loader, config)

        # initial frame, one per 50ms until 500ms, then 2 held frames
        assert result.success
        assert result.total_frames == 1 + 10 + 2
        files = sorted(output.glob("frame_*.png"))
        assert len(files) == 13
        with Image.open(files[0]) as first:
            assert first.size == (60, 60)
        with Image.open(files[-1]) as last, Image.open(files[-3]) as finished:
            assert list(last.getdata()) == list(finished.getdata())
        assert loader.state.is_finished
        loader.close()

    def test_hold_reuses_last_frame(self, recording_sinks):
        loader = short_loader()
        config = RenderConfig(fps=20, resolution=(30, 30), hold_last_frame_millis=150,
                              show_progress=False)
        result = AnimationRenderer().render(loader, config)

        sink = recording_sinks[0]
        assert result.total_frames == sink.frames_written == 1 + 10 + 3
        assert set(sink.shapes) == {(30, 30, 3)}
        # the held frames are the final frame itself, no copies are kept
        assert sink.ids[-1] == sink.ids[-2] == sink.ids[-3] == sink.ids[-4]
        assert sink.closed_with is True
        loader.close()

    def test_expected_frames_matches_output(self, recording_sinks):
        loader = short_loader()
        config = RenderConfig(fps=30, resolution=(20, 20), hold_last_frame_millis=500,
                              show_progress=False)
        renderer = AnimationRenderer()
        expected = renderer.expected_frames(loader, config)
        result = renderer.render(loader, config)
        assert result.total_frames == expected
        loader.close()

    @pytest.mark.asyncio
    async def test_render_inside_running_loop(self, recording_sinks):
        loader = short_loader()
        config = RenderConfig(fps=10, resolution=(40, 40), hold_last_frame_millis=0,
                              show_progress=False)
        result = await AnimationRenderer().render_async(loader, config)
        assert result.total_frames == 1 + 5
        assert loader.state.is_finished
        loader.close()

    def test_finished_loader_writes_final_frame_only(self, recording_sinks):
        loader = short_loader()
        loader.timeline.activate()
        loader.timeline.advance(0)
        loader.timeline.advance(1000)
        assert loader.state.is_finished

        config = RenderConfig(fps=10, resolution=(16, 16), hold_last_frame_millis=0,
                              show_progress=False)
        result = AnimationRenderer().render(loader, config)
        assert result.success
        assert result.total_frames == 1
        loader.close()


class TestGifSink:
    """Test the GIF output."""

    def test_identical_frames_are_merged(self, tmp_path):
        config = RenderConfig(output_path=str(tmp_path / "merged.gif"), fps=10,
                              resolution=(8, 8))
        sink = GifSink(config)
        sink.open()
        black = np.zeros((8, 8, 3), dtype=np.uint8)
        white = np.full((8, 8, 3), 255, dtype=np.uint8)
        for frame in (black, white, white, white):
            sink.write(frame)

        assert sink.frames_written == 4
        assert len(sink.images) == 2
        assert all(image.mode == 'P' for image in sink.images)
        assert sink.durations == [100, 300]
        sink.close()
        assert (tmp_path / "merged.gif").stat().st_size > 0


class TestRender:
    """Test writing the supported formats."""

    def test_render_gif(self, tmp_path):
        output = tmp_path / "loader.gif"
        config = RenderConfig(output_path=str(output), format=RenderFormat.GIF, fps=10,
                              resolution=(48, 48), show_progress=False)
        result = AnimationRenderer().render(short_loader(), config)

        assert result.success
        assert result.file_size > 0
        with Image.open(output) as image:
            assert image.size == (48, 48)
            assert image.n_frames > 1

    def test_render_frames(self, tmp_path):
        output = tmp_path / "frames"
        config = RenderConfig(output_path=str(output), format=RenderFormat.FRAMES, fps=10,
                              resolution=(32, 32), hold_last_frame_millis=0,
                              show_progress=False)
        result = AnimationRenderer().render(short_loader(), config)

        assert result.success
        assert result.total_frames == 6
        assert len(list(output.glob("frame_*.png"))) == 6

    def test_write_failure_is_reported(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        loader = short_loader()
        config = RenderConfig(output_path=str(blocker / "frames"), format=RenderFormat.FRAMES,
                              fps=10, resolution=(16, 16), show_progress=False)
        result = AnimationRenderer().render(loader, config)

        assert not result.success
        assert result.error_message
        # the export callback is detached after the failure
        assert loader.frame_callbacks == []
        loader.close()

    def test_unsupported_format(self):
        config = RenderConfig(format="avi", show_progress=False)
        with pytest.raises(ValueError):
            AnimationRenderer().render(short_loader(), config)

    def test_render_time_is_logged(self, tmp_path, caplog):
        config = RenderConfig(output_path=str(tmp_path / "frames"), format=RenderFormat.FRAMES,
                              fps=5, resolution=(16, 16), hold_last_frame_millis=0,
                              show_progress=False)
        with caplog.at_level("INFO", logger="core.animation.animation_renderer"):
            AnimationRenderer().render(short_loader(), config)
        assert any("Animation render took" in r.getMessage() for r in caplog.records)

    def test_defaults_from_dict(self):
        renderer = AnimationRenderer({'format': 'frames', 'fps': 12, 'resolution': [64, 32]})
        assert renderer.default_config.format is RenderFormat.FRAMES
        assert renderer.default_config.fps == 12
        assert renderer.default_config.resolution == (64, 32)
