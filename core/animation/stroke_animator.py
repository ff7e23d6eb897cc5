# -*- coding: utf-8 -*-
"""
笔触动画器

描边阶段：
1. 根据已用时间计算描边进度
2. 经缓动函数换算为需要绘制的节点数
3. 绘制轮廓节点序列的前缀
"""

import math
import logging
from typing import Callable, Optional

from ..canvas import Canvas, Color
from ..path_model import VectorPath
from utils.math_utils import LINEAR_OUT_SLOW_IN, MathUtils


class StrokeAnimator:
    """
    笔触动画器

    负责轮廓的逐步描边
    """

    def __init__(self, path: VectorPath, stroke_duration_millis: int = 2000,
                 stroke_color: Color = (68, 68, 68), stroke_width: float = 2.0,
                 easing: Callable[[float], float] = LINEAR_OUT_SLOW_IN):
        """
        初始化动画器

        Args:
            path: 轮廓路径
            stroke_duration_millis (int): 描边时长
            stroke_color: 描边颜色
            stroke_width (float): 参考坐标下的线宽
            easing: 缓动函数
        """
        self.path = path
        self.stroke_duration_millis = stroke_duration_millis
        self.stroke_color = stroke_color
        self.stroke_width = stroke_width
        self.easing = easing
        self.logger = logging.getLogger(__name__)

    @property
    def node_count(self) -> int:
        return len(self.path)

    def stroke_fraction(self, elapsed_time: float) -> float:
        return MathUtils.clamp(elapsed_time / self.stroke_duration_millis)

    def nodes_to_draw(self, elapsed_time: float) -> int:
        """
        计算需要绘制的节点数

        Args:
            elapsed_time (float): 已用时间（毫秒）

        Returns:
            int: 节点前缀长度，范围 [0, L]
        """
        eased = self.easing(self.stroke_fraction(elapsed_time))
        return min(self.node_count, int(math.floor(eased * self.node_count)))

    def draw_stroke(self, canvas: Canvas, elapsed_time: float,
                    nodes_to_draw: Optional[int] = None) -> int:
        """
        绘制描边

        Args:
            canvas: 画布（已应用缩放与平移）
            elapsed_time (float): 已用时间
            nodes_to_draw (int, optional): 预先计算的节点数

        Returns:
            int: 本次绘制的节点数
        """
        if nodes_to_draw is None:
            nodes_to_draw = self.nodes_to_draw(elapsed_time)
        canvas.stroke_polylines(self.path.polylines(nodes_to_draw),
                                self.stroke_color, self.stroke_width)
        return nodes_to_draw
