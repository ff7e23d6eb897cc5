# -*- coding: utf-8 -*-
"""
动画控制器

加载动画的组合入口：
1. 持有时间轴（已用时间与阶段）
2. 将参考坐标下的图形按比例缩放并居中到输出画布
3. 每帧依次执行描边与填充
4. 向宿主发出重绘通知
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import numpy as np

from ..canvas import Canvas, Color
from ..path_model import PathNode, Size, VectorPath
from ..silhouette import CAT_VECTOR_SIZE, cat_path
from .flood_renderer import FloodRenderer, WaveParameters
from .stroke_animator import StrokeAnimator
from .timeline_manager import AnimationState, TimelineManager
from utils.math_utils import LINEAR_OUT_SLOW_IN, get_easing
from utils.performance import FrameStats, Timer


@dataclass(frozen=True)
class LoaderConfig:
    """
    加载动画配置
    """
    stroke_color: Color = (68, 68, 68)
    fill_color: Color = (255, 0, 255)
    stroke_duration_millis: int = 2000
    fill_duration_millis: int = 8000
    stroke_width: float = 2.0
    background_color: Color = (255, 255, 255)
    easing: str = "linear_out_slow_in"
    wave: WaveParameters = field(default_factory=WaveParameters)


@dataclass(frozen=True)
class FrameProgress:
    """
    单帧的绘制进度
    """
    elapsed_time: int
    stroke_fraction: float
    nodes_to_draw: int
    fill_active: bool
    fill_fraction: float


def fit_transform(surface_size: Tuple[float, float], reference_size: Size) -> Tuple[float, float, float]:
    """
    计算等比缩放并居中的变换

    Args:
        surface_size: 输出画布尺寸 (width, height)
        reference_size: 参考尺寸

    Returns:
        Tuple[float, float, float]: (scale, dx, dy)
    """
    surface_width, surface_height = surface_size
    scale = min(surface_width / reference_size.width, surface_height / reference_size.height)
    dx = (surface_width - reference_size.width * scale) / 2.0
    dy = (surface_height - reference_size.height * scale) / 2.0
    return scale, dx, dy


class FillableLoader:
    """
    可填充加载动画

    先逐步描出轮廓，再以波浪形状从下往上填充
    """

    def __init__(self, original_vector_size: Size = CAT_VECTOR_SIZE,
                 stroke_color: Color = (68, 68, 68),
                 fill_color: Color = (255, 0, 255),
                 stroke_duration_millis: int = 2000,
                 fill_duration_millis: int = 8000,
                 path: Optional[VectorPath] = None,
                 easing: Callable[[float], float] = LINEAR_OUT_SLOW_IN,
                 stroke_width: float = 2.0,
                 background_color: Color = (255, 255, 255),
                 wave: Optional[WaveParameters] = None):
        """
        初始化加载动画

        Args:
            original_vector_size: 路径数据的参考尺寸
            stroke_color: 描边颜色
            fill_color: 填充颜色
            stroke_duration_millis (int): 描边时长
            fill_duration_millis (int): 填充时长
            path: 轮廓路径，默认使用猫咪轮廓
            easing: 描边进度的缓动函数
            stroke_width (float): 参考坐标下的线宽
            background_color: 每帧清屏颜色
            wave: 波浪裁剪参数
        """
        self.logger = logging.getLogger(__name__)
        self.original_vector_size = original_vector_size
        self.background_color = background_color
        self.path = path if path is not None else cat_path()

        self.timeline = TimelineManager(stroke_duration_millis, fill_duration_millis)
        self.stroke_animator = StrokeAnimator(self.path, stroke_duration_millis,
                                              stroke_color, stroke_width, easing)
        self.flood_renderer = FloodRenderer(self.path, original_vector_size,
                                            stroke_duration_millis, fill_duration_millis,
                                            fill_color, wave)

        # 重绘通知
        self.frame_callbacks: List[Callable[[AnimationState], None]] = []
        self._unsubscribe = self.timeline.subscribe(self._on_state_changed)

        self.stats = FrameStats()

        self.logger.info(f"Fillable loader initialized: {len(self.path)} path nodes, "
                         f"stroke {stroke_duration_millis}ms, fill {fill_duration_millis}ms")

    @classmethod
    def from_config(cls, config: LoaderConfig, **kwargs) -> 'FillableLoader':
        """根据 LoaderConfig 创建"""
        return cls(stroke_color=config.stroke_color,
                   fill_color=config.fill_color,
                   stroke_duration_millis=config.stroke_duration_millis,
                   fill_duration_millis=config.fill_duration_millis,
                   stroke_width=config.stroke_width,
                   background_color=config.background_color,
                   easing=get_easing(config.easing),
                   wave=config.wave,
                   **kwargs)

    @classmethod
    def from_nodes(cls, nodes: List[PathNode], original_vector_size: Size, **kwargs) -> 'FillableLoader':
        """使用自定义路径节点创建"""
        return cls(original_vector_size=original_vector_size, path=VectorPath(nodes), **kwargs)

    @property
    def state(self) -> AnimationState:
        return self.timeline.state

    def add_frame_callback(self, callback: Callable[[AnimationState], None]):
        """
        添加重绘回调

        Args:
            callback: 状态变化时调用
        """
        self.frame_callbacks.append(callback)

    def remove_frame_callback(self, callback: Callable[[AnimationState], None]):
        if callback in self.frame_callbacks:
            self.frame_callbacks.remove(callback)

    def _on_state_changed(self, state: AnimationState):
        for callback in list(self.frame_callbacks):
            try:
                callback(state)
            except Exception as e:
                self.logger.error(f"Error in frame callback: {str(e)}")

    def progress(self, elapsed_time: Optional[int] = None) -> FrameProgress:
        """
        计算某一时刻的绘制进度

        Args:
            elapsed_time (int, optional): 已用时间，默认取时间轴当前值

        Returns:
            FrameProgress: 绘制进度
        """
        if elapsed_time is None:
            elapsed_time = self.timeline.state.elapsed_time
        fill_active = self.flood_renderer.is_fill_active(elapsed_time)
        return FrameProgress(
            elapsed_time=elapsed_time,
            stroke_fraction=self.stroke_animator.stroke_fraction(elapsed_time),
            nodes_to_draw=self.stroke_animator.nodes_to_draw(elapsed_time),
            fill_active=fill_active,
            fill_fraction=self.flood_renderer.fill_fraction(elapsed_time) if fill_active else 0.0,
        )

    def draw(self, canvas: Canvas, elapsed_time: Optional[int] = None) -> FrameProgress:
        """
        完整重绘一帧

        Args:
            canvas: 输出画布
            elapsed_time (int, optional): 已用时间，默认取时间轴当前值

        Returns:
            FrameProgress: 本帧的绘制进度
        """
        timer = Timer("draw")
        with timer:
            progress = self.progress(elapsed_time)
            scale, dx, dy = fit_transform(canvas.size, self.original_vector_size)

            canvas.clear(self.background_color)
            with canvas.translate(dx, dy), canvas.scale(scale):
                self.stroke_animator.draw_stroke(canvas, progress.elapsed_time, progress.nodes_to_draw)
                self.flood_renderer.draw_filling(canvas, progress.elapsed_time)

        self.stats.record(timer.elapsed_time)
        return progress

    def render_frame(self, width: int, height: int, elapsed_time: Optional[int] = None) -> np.ndarray:
        """
        渲染一帧到新画布

        Args:
            width (int): 画布宽度
            height (int): 画布高度
            elapsed_time (int, optional): 已用时间

        Returns:
            np.ndarray: RGB 图像
        """
        canvas = Canvas(width, height, self.background_color)
        self.draw(canvas, elapsed_time)
        return canvas.get_canvas_image()

    def close(self):
        """断开与时间轴的订阅并停止帧循环"""
        self.timeline.deactivate()
        self._unsubscribe()
        self.frame_callbacks.clear()
