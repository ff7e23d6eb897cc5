# -*- coding: utf-8 -*-
"""
工具模块

提供各种辅助工具和实用函数
包括数学与缓动、颜色与可视化、日志、性能统计等工具
"""

from .math_utils import MathUtils, CubicBezierEasing, get_easing
from .visualization import ColorUtils, plot_animation_progress
from .logging_utils import setup_logging, LogManager
from .performance import Timer, FrameStats, measure_time

__all__ = [
    # 数学工具
    'MathUtils',
    'CubicBezierEasing',
    'get_easing',

    # 可视化工具
    'ColorUtils',
    'plot_animation_progress',

    # 日志工具
    'setup_logging',
    'LogManager',

    # 性能监控工具
    'Timer',
    'FrameStats',
    'measure_time'
]
