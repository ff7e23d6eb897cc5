# -*- coding: utf-8 -*-
"""
帧时钟

为时间轴提供逐帧的时间戳（毫秒，单调递增）
包括实时时钟、离线模拟时钟以及由调用方手动推进的时钟
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List, Optional


class FrameClock(ABC):
    """
    帧时钟接口

    next_frame() 挂起直到下一帧就绪，并返回该帧的时间戳（毫秒）
    """

    @abstractmethod
    async def next_frame(self) -> int:
        raise NotImplementedError


class MonotonicFrameClock(FrameClock):
    """
    实时帧时钟

    以固定帧率对齐事件循环的单调时钟
    """

    def __init__(self, fps: float = 60.0):
        self.fps = fps
        self.frame_interval = 1.0 / fps
        self._next_deadline: Optional[float] = None

    async def next_frame(self) -> int:
        loop = asyncio.get_running_loop()
        now = loop.time()
        if self._next_deadline is None or self._next_deadline < now:
            self._next_deadline = now
        delay = self._next_deadline - now
        await asyncio.sleep(delay)
        self._next_deadline += self.frame_interval
        return int(loop.time() * 1000)


class SimulatedFrameClock(FrameClock):
    """
    模拟帧时钟

    按固定帧率产生确定的时间戳，不做真实等待，用于离线渲染
    """

    def __init__(self, fps: float = 30.0, start_millis: int = 0):
        self.fps = fps
        self.start_millis = start_millis
        self.frame_count = 0

    @property
    def frame_interval_millis(self) -> float:
        return 1000.0 / self.fps

    async def next_frame(self) -> int:
        # 让出控制权
        await asyncio.sleep(0)
        timestamp = self.start_millis + int(round(self.frame_count * self.frame_interval_millis))
        self.frame_count += 1
        return timestamp


class ManualFrameClock(FrameClock):
    """
    手动帧时钟

    由调用方调用 tick() 推送帧；没有订阅者等待时推送的帧被丢弃
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._waiters: List[asyncio.Future] = []
        self.delivered = 0

    @property
    def has_waiters(self) -> bool:
        return any(not w.done() for w in self._waiters)

    async def next_frame(self) -> int:
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            return await waiter
        finally:
            if waiter in self._waiters:
                self._waiters.remove(waiter)

    def tick(self, frame_time_millis: int) -> int:
        """
        推送一帧

        Args:
            frame_time_millis (int): 帧时间戳

        Returns:
            int: 收到该帧的订阅者数量
        """
        waiters, self._waiters = self._waiters, []
        notified = 0
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(int(frame_time_millis))
                notified += 1
        if notified == 0:
            self.logger.debug(f"Frame {frame_time_millis} dropped, no subscriber")
        self.delivered += notified
        return notified
