# -*- coding: utf-8 -*-
"""
性能监控工具

提供计时器与逐帧渲染耗时统计
"""

import time
import logging
from collections import deque
from functools import wraps
from typing import Any, Callable, Deque, Dict

import numpy as np


class Timer:
    """
    计时器类

    提供高精度时间测量功能
    """

    def __init__(self, name: str = "Timer"):
        """
        初始化计时器

        Args:
            name (str): 计时器名称
        """
        self.name = name
        self.start_time = None
        self.end_time = None
        self.elapsed_time = 0.0
        self.is_running = False

    def start(self):
        """
        开始计时
        """
        if self.is_running:
            raise RuntimeError(f"Timer '{self.name}' is already running")

        self.start_time = time.perf_counter()
        self.is_running = True

    def stop(self) -> float:
        """
        停止计时

        Returns:
            float: 经过的时间（秒）
        """
        if not self.is_running:
            raise RuntimeError(f"Timer '{self.name}' is not running")

        self.end_time = time.perf_counter()
        self.elapsed_time = self.end_time - self.start_time
        self.is_running = False

        return self.elapsed_time

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()


class FrameStats:
    """
    帧耗时统计

    只保留最近 window 帧的数据
    """

    def __init__(self, window: int = 100):
        self.window = window
        self.frame_times: Deque[float] = deque(maxlen=window)
        self.frames_rendered = 0
        self.total_render_time = 0.0

    def record(self, seconds: float):
        self.frame_times.append(seconds)
        self.frames_rendered += 1
        self.total_render_time += seconds

    def summary(self) -> Dict[str, Any]:
        """
        获取统计摘要

        Returns:
            Dict[str, Any]: 帧数、平均/最小/最大耗时（毫秒）
        """
        stats: Dict[str, Any] = {
            'frames_rendered': self.frames_rendered,
            'total_render_time': self.total_render_time,
        }
        if self.frame_times:
            times = np.asarray(self.frame_times) * 1000.0
            stats['average_frame_ms'] = float(np.mean(times))
            stats['min_frame_ms'] = float(np.min(times))
            stats['max_frame_ms'] = float(np.max(times))
        return stats


def measure_time(name: str = "Operation", logger: logging.Logger = None) -> Callable:
    """
    计时装饰器，将耗时写入日志

    Args:
        name (str): 操作名称
        logger (logging.Logger): 日志记录器，默认使用被装饰函数所在模块的记录器
    """
    def decorator(func: Callable) -> Callable:
        log = logger or logging.getLogger(func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            with Timer(name) as timer:
                result = func(*args, **kwargs)
            log.info(f"{name} took {timer.elapsed_time:.3f}s")
            return result

        return wrapper

    return decorator
