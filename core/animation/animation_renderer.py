# -*- coding: utf-8 -*-
"""
动画渲染器模块

离线驱动加载动画的时间轴，逐帧渲染并直接写入视频、GIF 或图片序列
"""

import asyncio
import logging
import math
import os
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import cv2
import numpy as np
from PIL import Image
from tqdm import tqdm

from utils.performance import measure_time
from .animation_controller import FillableLoader
from .frame_clock import SimulatedFrameClock
from .timeline_manager import AnimationState


class RenderFormat(Enum):
    """渲染格式"""
    MP4 = "mp4"
    GIF = "gif"
    FRAMES = "frames"  # 输出单独帧


@dataclass
class RenderConfig:
    """渲染配置"""
    output_path: str = "output/loader.gif"
    format: RenderFormat = RenderFormat.GIF
    fps: int = 30
    resolution: Tuple[int, int] = (480, 480)
    codec: str = "mp4v"
    hold_last_frame_millis: int = 500  # 结束后停留时间
    show_progress: bool = True


@dataclass
class RenderResult:
    """渲染结果"""
    success: bool
    output_path: str
    total_frames: int
    duration: float        # 动画时长（秒）
    file_size: int
    average_fps: float     # 渲染速度
    error_message: Optional[str] = None
    warnings: Optional[List[str]] = None


class FrameSink:
    """
    帧输出

    open() 准备输出目标，write() 逐帧写入，close() 完成并释放资源
    """

    def __init__(self, config: RenderConfig):
        self.config = config
        self.frames_written = 0

    def open(self):
        Path(self.config.output_path).parent.mkdir(parents=True, exist_ok=True)

    def write(self, frame: np.ndarray):
        self._write(frame)
        self.frames_written += 1

    def _write(self, frame: np.ndarray):
        raise NotImplementedError

    def close(self, finalize: bool = True):
        pass


class VideoSink(FrameSink):
    """cv2.VideoWriter 视频输出"""

    def __init__(self, config: RenderConfig):
        super().__init__(config)
        self.writer = None

    def open(self):
        super().open()
        width, height = self.config.resolution
        fourcc = cv2.VideoWriter_fourcc(*self.config.codec)
        self.writer = cv2.VideoWriter(self.config.output_path, fourcc, self.config.fps, (width, height))
        if not self.writer.isOpened():
            raise OSError(f"failed to open video writer for {self.config.output_path}")

    def _write(self, frame: np.ndarray):
        # OpenCV使用BGR
        self.writer.write(cv2.cvtColor(frame, cv2.COLOR_RGB2BGR))

    def close(self, finalize: bool = True):
        if self.writer is not None:
            self.writer.release()
            self.writer = None


class GifSink(FrameSink):
    """
    GIF 输出

    每帧写入时即量化为调色板图像，连续相同的帧合并为一帧并累加显示时长
    """

    def __init__(self, config: RenderConfig):
        super().__init__(config)
        self.frame_duration = int(round(1000 / config.fps))
        self.images: List[Image.Image] = []
        self.durations: List[int] = []
        self._last_frame: Optional[np.ndarray] = None

    def _write(self, frame: np.ndarray):
        if self._last_frame is not None and np.array_equal(frame, self._last_frame):
            self.durations[-1] += self.frame_duration
            return
        self.images.append(Image.fromarray(frame).quantize(colors=256))
        self.durations.append(self.frame_duration)
        self._last_frame = frame

    def close(self, finalize: bool = True):
        if finalize and self.images:
            self.images[0].save(
                self.config.output_path,
                save_all=True,
                append_images=self.images[1:],
                duration=self.durations,
                loop=0,
                optimize=False
            )
        self.images = []
        self.durations = []
        self._last_frame = None


class FrameSequenceSink(FrameSink):
    """PNG 图片序列输出"""

    def open(self):
        Path(self.config.output_path).mkdir(parents=True, exist_ok=True)

    def _write(self, frame: np.ndarray):
        filepath = Path(self.config.output_path) / f"frame_{self.frames_written:06d}.png"
        if not cv2.imwrite(str(filepath), cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)):
            raise OSError(f"failed to write {filepath}")


FRAME_SINKS = {
    RenderFormat.MP4: VideoSink,
    RenderFormat.GIF: GifSink,
    RenderFormat.FRAMES: FrameSequenceSink,
}


class AnimationRenderer:
    """动画渲染器"""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        初始化动画渲染器

        Args:
            config: 配置参数（字段同 RenderConfig）
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)
        self.default_config = RenderConfig(
            output_path=self.config.get('output_path', 'output/loader.gif'),
            format=RenderFormat(self.config.get('format', 'gif')),
            fps=int(self.config.get('fps', 30)),
            resolution=tuple(self.config.get('resolution', (480, 480))),
            codec=self.config.get('codec', 'mp4v'),
            hold_last_frame_millis=int(self.config.get('hold_last_frame_millis', 500)),
            show_progress=bool(self.config.get('show_progress', True)),
        )

    @staticmethod
    def hold_frame_count(config: RenderConfig) -> int:
        return int(round(config.hold_last_frame_millis * config.fps / 1000.0))

    def expected_frames(self, loader: FillableLoader, config: RenderConfig) -> int:
        """初始帧 + 每个模拟帧一次状态更新 + 停留帧"""
        if loader.state.is_finished:
            return 1 + self.hold_frame_count(config)
        total = loader.timeline.total_duration_millis
        return 1 + math.ceil(total * config.fps / 1000.0) + self.hold_frame_count(config)

    async def render_async(self, loader: FillableLoader,
                           config: Optional[RenderConfig] = None) -> RenderResult:
        """
        以模拟帧时钟运行时间轴，每次状态更新渲染一帧并立即写出

        Args:
            loader: 加载动画（需尚未开始）
            config: 渲染配置

        Returns:
            RenderResult: 渲染结果

        Raises:
            ValueError: 不支持的输出格式
        """
        config = config or self.default_config
        if not isinstance(config.format, RenderFormat):
            raise ValueError(f"unsupported render format: {config.format!r}")

        width, height = config.resolution
        sink = FRAME_SINKS[config.format](config)
        states: asyncio.Queue = asyncio.Queue()
        on_frame = states.put_nowait
        runner: Optional[asyncio.Task] = None
        finalize = False
        start_time = time.time()

        progress = tqdm(total=self.expected_frames(loader, config),
                        desc=f"Rendering {config.format.value}", unit='frame',
                        disable=not config.show_progress)
        loader.add_frame_callback(on_frame)
        try:
            sink.open()
            last_frame = loader.render_frame(width, height)
            sink.write(last_frame)
            progress.update()

            if loader.state.is_finished:
                self.logger.warning("Loader animation already finished, writing final frame only")
            else:
                runner = asyncio.create_task(loader.timeline.run(SimulatedFrameClock(config.fps)))
                while True:
                    state: AnimationState = await states.get()
                    last_frame = loader.render_frame(width, height, state.elapsed_time)
                    sink.write(last_frame)
                    progress.update()
                    if state.is_finished:
                        break
                await runner

            # 只保留最后一帧用于停留
            for _ in range(self.hold_frame_count(config)):
                sink.write(last_frame)
                progress.update()
            finalize = True
            sink.close(finalize=True)
        except (OSError, cv2.error) as e:
            self.logger.error(f"Error writing {config.format.value} output: {str(e)}")
            return RenderResult(
                success=False,
                output_path="",
                total_frames=sink.frames_written,
                duration=sink.frames_written / config.fps,
                file_size=0,
                average_fps=0.0,
                error_message=str(e)
            )
        finally:
            progress.close()
            loader.remove_frame_callback(on_frame)
            if runner is not None and not runner.done():
                runner.cancel()
                await asyncio.gather(runner, return_exceptions=True)
            if not finalize:
                sink.close(finalize=False)

        total_frames = sink.frames_written
        elapsed = time.time() - start_time
        output_path = config.output_path
        file_size = os.path.getsize(output_path) if os.path.isfile(output_path) else 0
        self.logger.info(f"Rendered {total_frames} frames to {output_path} in {elapsed:.2f}s")

        return RenderResult(
            success=True,
            output_path=output_path,
            total_frames=total_frames,
            duration=total_frames / config.fps,
            file_size=file_size,
            average_fps=total_frames / elapsed if elapsed > 0 else 0.0
        )

    @measure_time("Animation render")
    def render(self, loader: FillableLoader, config: Optional[RenderConfig] = None) -> RenderResult:
        """
        渲染并导出动画

        Args:
            loader: 加载动画
            config: 渲染配置

        Returns:
            RenderResult: 渲染结果

        Raises:
            ValueError: 不支持的输出格式
        """
        return asyncio.run(self.render_async(loader, config))
