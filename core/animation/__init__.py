# -*- coding: utf-8 -*-
"""
加载动画模块

1. 时间轴与帧时钟
2. 轮廓描边
3. 波浪填充
4. 组合控制与离线导出
"""

from .frame_clock import FrameClock, MonotonicFrameClock, SimulatedFrameClock, ManualFrameClock
from .timeline_manager import TimelineManager, AnimationPhase, AnimationState, LifecycleState
from .stroke_animator import StrokeAnimator
from .flood_renderer import FloodRenderer, WaveParameters
from .animation_controller import FillableLoader, LoaderConfig, FrameProgress, fit_transform
from .animation_renderer import AnimationRenderer, RenderFormat, RenderConfig, RenderResult

__all__ = [
    'FrameClock',
    'MonotonicFrameClock',
    'SimulatedFrameClock',
    'ManualFrameClock',
    'TimelineManager',
    'AnimationPhase',
    'AnimationState',
    'LifecycleState',
    'StrokeAnimator',
    'FloodRenderer',
    'WaveParameters',
    'FillableLoader',
    'LoaderConfig',
    'FrameProgress',
    'fit_transform',
    'AnimationRenderer',
    'RenderFormat',
    'RenderConfig',
    'RenderResult'
]
