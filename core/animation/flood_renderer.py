# -*- coding: utf-8 -*-
"""
Flood渲染器

填充阶段：
1. 描边完成后按已用时间计算填充进度
2. 生成波浪形的裁剪区域，从底部向上推进
3. 在裁剪区域内填充轮廓
"""

import math
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..canvas import Canvas, Color
from ..path_model import Size, VectorPath
from utils.math_utils import MathUtils


@dataclass(frozen=True)
class WaveParameters:
    """
    波浪裁剪参数

    边界高度 y(x) = H * (1 - f) + A(f) * sin(2π * waves * x / W + 2π * cycles * f)，
    其中 A(f) = amplitude_ratio * H * sin(π * f)。
    amplitude_ratio * (π + 2π * cycles) < 1 时每一列的边界都单调上升。
    """
    sample_points: int = 128
    amplitude_ratio: float = 0.04
    waves: float = 1.5
    cycles: float = 2.0


class FloodRenderer:
    """
    Flood渲染器

    使用上升的波浪裁剪区域逐步显示填充
    """

    def __init__(self, path: VectorPath, reference_size: Size,
                 stroke_duration_millis: int = 2000, fill_duration_millis: int = 8000,
                 fill_color: Color = (255, 0, 255),
                 wave: Optional[WaveParameters] = None):
        """
        初始化渲染器

        Args:
            path: 轮廓路径（填充区域）
            reference_size: 参考尺寸（裁剪区域的包围盒）
            stroke_duration_millis (int): 描边时长
            fill_duration_millis (int): 填充时长
            fill_color: 填充颜色
            wave: 波浪参数
        """
        self.reference_size = reference_size
        self.stroke_duration_millis = stroke_duration_millis
        self.fill_duration_millis = fill_duration_millis
        self.fill_color = fill_color
        self.wave = wave or WaveParameters()
        self.logger = logging.getLogger(__name__)

        # 填充区域只构建一次
        self.fill_polygons = path.fill_polygons()

    def is_fill_active(self, elapsed_time: float) -> bool:
        """描边完全结束后（严格大于描边时长）才开始填充"""
        return elapsed_time > self.stroke_duration_millis

    def fill_fraction(self, elapsed_time: float) -> float:
        return MathUtils.clamp(
            (elapsed_time - self.stroke_duration_millis) / float(self.fill_duration_millis)
        )

    def wave_edge(self, fill_fraction: float) -> np.ndarray:
        """
        计算波浪边界

        Args:
            fill_fraction (float): 填充进度

        Returns:
            np.ndarray: 边界采样点 (sample_points, 2)
        """
        width = self.reference_size.width
        height = self.reference_size.height
        f = MathUtils.clamp(fill_fraction)

        x = np.linspace(0.0, width, self.wave.sample_points)
        baseline = height * (1.0 - f)
        amplitude = self.wave.amplitude_ratio * height * math.sin(math.pi * f)
        phase = 2 * math.pi * self.wave.waves * x / width + 2 * math.pi * self.wave.cycles * f
        y = np.clip(baseline + amplitude * np.sin(phase), 0.0, height)
        return np.stack([x, y], axis=1)

    def wave_clip_polygon(self, fill_fraction: float) -> np.ndarray:
        """
        构建波浪裁剪多边形（波浪边界 + 包围盒底边）

        Args:
            fill_fraction (float): 填充进度

        Returns:
            np.ndarray: 多边形顶点
        """
        width = self.reference_size.width
        height = self.reference_size.height
        edge = self.wave_edge(fill_fraction)
        bottom = np.array([[width, height], [0.0, height]])
        return np.concatenate([edge, bottom], axis=0)

    def draw_filling(self, canvas: Canvas, elapsed_time: float) -> float:
        """
        绘制填充

        Args:
            canvas: 画布（已应用缩放与平移）
            elapsed_time (float): 已用时间

        Returns:
            float: 本次使用的填充进度（未激活时为 0）
        """
        if not self.is_fill_active(elapsed_time):
            return 0.0

        fill_fraction = self.fill_fraction(elapsed_time)
        if fill_fraction <= 0.0:
            return 0.0

        if fill_fraction >= 1.0:
            # 填充完成，不再裁剪
            canvas.fill_polygons(self.fill_polygons, self.fill_color)
            return 1.0

        with canvas.clip([self.wave_clip_polygon(fill_fraction)]):
            canvas.fill_polygons(self.fill_polygons, self.fill_color)
        return fill_fraction
