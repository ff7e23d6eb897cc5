# -*- coding: utf-8 -*-
"""
数学工具

提供动画计算中用到的数学函数
包括数值截断、插值与三次贝塞尔缓动曲线
"""

import logging
from typing import Callable, Dict

from scipy.optimize import brentq


class MathUtils:
    """
    数学工具类

    提供基础数学计算功能
    """

    @staticmethod
    def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
        """
        将数值截断到区间 [lower, upper]

        Args:
            value (float): 输入值
            lower (float): 下界
            upper (float): 上界

        Returns:
            float: 截断后的值
        """
        return max(lower, min(upper, value))

    @staticmethod
    def lerp(start: float, end: float, t: float) -> float:
        """线性插值"""
        return start + (end - start) * t


class CubicBezierEasing:
    """
    三次贝塞尔缓动曲线

    曲线端点固定为 (0, 0) 与 (1, 1)，由两个控制点 (x1, y1)、(x2, y2) 决定形状。
    对给定的进度 x 求解参数 t 使 bezier_x(t) == x，再返回 bezier_y(t)。
    """

    def __init__(self, x1: float, y1: float, x2: float, y2: float):
        self.x1 = x1
        self.y1 = y1
        self.x2 = x2
        self.y2 = y2

    @staticmethod
    def _evaluate(a: float, b: float, t: float) -> float:
        # 端点为 0 和 1 的一维三次贝塞尔
        mt = 1.0 - t
        return 3 * a * mt * mt * t + 3 * b * mt * t * t + t * t * t

    def __call__(self, fraction: float) -> float:
        if fraction <= 0.0:
            return 0.0
        if fraction >= 1.0:
            return 1.0

        t = brentq(lambda s: self._evaluate(self.x1, self.x2, s) - fraction,
                   0.0, 1.0, xtol=1e-9)
        return MathUtils.clamp(self._evaluate(self.y1, self.y2, t))

    def __repr__(self):
        return f"CubicBezierEasing({self.x1}, {self.y1}, {self.x2}, {self.y2})"


def linear_easing(fraction: float) -> float:
    return MathUtils.clamp(fraction)


# 减速曲线：起步线性，末端缓慢
LINEAR_OUT_SLOW_IN = CubicBezierEasing(0.0, 0.0, 0.2, 1.0)
FAST_OUT_SLOW_IN = CubicBezierEasing(0.4, 0.0, 0.2, 1.0)

EASING_FUNCTIONS: Dict[str, Callable[[float], float]] = {
    'linear_out_slow_in': LINEAR_OUT_SLOW_IN,
    'fast_out_slow_in': FAST_OUT_SLOW_IN,
    'linear': linear_easing,
}


def get_easing(name: str) -> Callable[[float], float]:
    """
    根据名称获取缓动函数

    Args:
        name (str): 缓动函数名称

    Returns:
        Callable[[float], float]: 缓动函数

    Raises:
        ValueError: 未知的缓动函数名称
    """
    try:
        return EASING_FUNCTIONS[name]
    except KeyError:
        logging.getLogger(__name__).error(f"Unknown easing function: {name}")
        raise ValueError(f"unknown easing function '{name}', "
                         f"expected one of {sorted(EASING_FUNCTIONS)}") from None
