#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
画布管理模块
提供绘图表面：仿射变换栈、多边形裁剪、折线描边与多边形填充
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple

import cv2
import numpy as np

from .path_model import Polyline

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]

# cv2 定点坐标的小数位数
_SHIFT = 4
_SHIFT_SCALE = 1 << _SHIFT


class Canvas:
    """绘画画布类（RGB，uint8）"""

    def __init__(self, width: int = 800, height: int = 600,
                 background_color: Color = (255, 255, 255),
                 antialias: bool = True):
        self.width = int(width)
        self.height = int(height)
        self.background_color = tuple(background_color)
        self.line_type = cv2.LINE_AA if antialias else cv2.LINE_8

        # 创建画布
        self.image = np.full((self.height, self.width, 3), self.background_color, dtype=np.uint8)

        # 变换矩阵与裁剪掩码
        self._matrix = np.eye(3)
        self._clip_mask: Optional[np.ndarray] = None

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix.copy()

    @property
    def current_scale(self) -> float:
        """当前变换的等效缩放比例"""
        return float(np.sqrt(abs(np.linalg.det(self._matrix[:2, :2]))))

    def clear(self, color: Optional[Color] = None):
        """清空画布"""
        fill = self.background_color if color is None else tuple(color)
        self.image[:] = fill

    @contextmanager
    def _push(self, operation: np.ndarray) -> Iterator['Canvas']:
        saved = self._matrix
        self._matrix = saved @ operation
        try:
            yield self
        finally:
            self._matrix = saved

    def translate(self, dx: float, dy: float):
        """平移（上下文管理器）"""
        return self._push(np.array([[1.0, 0.0, dx],
                                    [0.0, 1.0, dy],
                                    [0.0, 0.0, 1.0]]))

    def scale(self, sx: float, sy: Optional[float] = None):
        """缩放（上下文管理器）"""
        sy = sx if sy is None else sy
        return self._push(np.array([[sx, 0.0, 0.0],
                                    [0.0, sy, 0.0],
                                    [0.0, 0.0, 1.0]]))

    def transform_points(self, points: np.ndarray) -> np.ndarray:
        """将局部坐标转换为画布像素坐标"""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        homogeneous = np.hstack([pts, np.ones((len(pts), 1))])
        return (homogeneous @ self._matrix.T)[:, :2]

    def _to_fixed(self, points: np.ndarray) -> np.ndarray:
        return np.round(self.transform_points(points) * _SHIFT_SCALE).astype(np.int32)

    @contextmanager
    def clip(self, polygons: Sequence[np.ndarray]) -> Iterator['Canvas']:
        """
        多边形裁剪（上下文管理器）

        在上下文内的绘制只在多边形覆盖的区域可见，可嵌套（取交集）

        Args:
            polygons: 局部坐标下的多边形列表
        """
        mask = np.zeros((self.height, self.width), dtype=np.uint8)
        fixed = [self._to_fixed(p) for p in polygons if len(p) >= 3]
        if fixed:
            cv2.fillPoly(mask, fixed, 255, lineType=self.line_type, shift=_SHIFT)

        saved = self._clip_mask
        self._clip_mask = mask if saved is None else np.minimum(saved, mask)
        try:
            yield self
        finally:
            self._clip_mask = saved

    def stroke_polylines(self, polylines: Sequence[Polyline], color: Color, width: float = 1.0):
        """
        描边折线

        Args:
            polylines: 折线列表
            color: RGB 颜色
            width (float): 局部坐标下的线宽（随变换缩放）
        """
        if not polylines:
            return
        thickness = max(1, int(round(width * self.current_scale)))
        mask = np.zeros((self.height, self.width), dtype=np.uint8)
        for line in polylines:
            cv2.polylines(mask, [self._to_fixed(line.points)], bool(line.closed), 255,
                          thickness=thickness, lineType=self.line_type, shift=_SHIFT)
        self._composite(mask, color)

    def fill_polygons(self, polygons: Sequence[np.ndarray], color: Color):
        """
        填充多边形（奇偶规则，内部的子路径形成镂空）

        Args:
            polygons: 多边形列表
            color: RGB 颜色
        """
        fixed = [self._to_fixed(p) for p in polygons if len(p) >= 3]
        if not fixed:
            return
        mask = np.zeros((self.height, self.width), dtype=np.uint8)
        cv2.fillPoly(mask, fixed, 255, lineType=self.line_type, shift=_SHIFT)
        self._composite(mask, color)

    def _composite(self, mask: np.ndarray, color: Color):
        if self._clip_mask is not None:
            mask = np.minimum(mask, self._clip_mask)
        alpha = mask.astype(np.float32)[:, :, None] / 255.0
        if not alpha.any():
            return
        blended = self.image.astype(np.float32) * (1.0 - alpha) + \
            np.asarray(color, dtype=np.float32) * alpha
        self.image = np.clip(np.round(blended), 0, 255).astype(np.uint8)

    def count_pixels(self, color: Color, tolerance: int = 0) -> int:
        """统计与指定颜色相近的像素数"""
        diff = np.abs(self.image.astype(np.int16) - np.asarray(color, dtype=np.int16))
        return int(np.sum(np.all(diff <= tolerance, axis=2)))

    def get_canvas_image(self) -> np.ndarray:
        """获取画布图像（RGB）"""
        return self.image.copy()

    def to_bgr(self) -> np.ndarray:
        """转换为 OpenCV 使用的 BGR 顺序"""
        return cv2.cvtColor(self.image, cv2.COLOR_RGB2BGR)

    def save_canvas(self, filepath: str) -> bool:
        """保存画布图像"""
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        ok = cv2.imwrite(str(filepath), self.to_bgr())
        if not ok:
            logger.error(f"Failed to write canvas image: {filepath}")
        return bool(ok)
