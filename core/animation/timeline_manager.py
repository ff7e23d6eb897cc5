# -*- coding: utf-8 -*-
"""
时间轴管理器

维护加载动画的已用时间与动画阶段：
1. 每帧根据帧时钟推进已用时间
2. 按描边/填充时长切换动画阶段
3. 由宿主的激活/非激活信号控制帧循环的挂起与恢复
4. 通过订阅回调通知渲染器
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, List, Optional

from .frame_clock import FrameClock


class AnimationPhase(IntEnum):
    """
    动画阶段枚举（有序）
    """
    STROKE_STARTED = 0   # 描边中
    FILL_STARTED = 1     # 填充中
    FINISHED = 2         # 已结束


class LifecycleState(Enum):
    """
    宿主生命周期状态
    """
    INACTIVE = "inactive"
    ACTIVE = "active"


@dataclass(frozen=True)
class AnimationState:
    """
    动画状态快照
    """
    phase: AnimationPhase = AnimationPhase.STROKE_STARTED
    elapsed_time: int = 0  # 毫秒

    @property
    def is_finished(self) -> bool:
        return self.phase is AnimationPhase.FINISHED


StateCallback = Callable[[AnimationState], None]


class TimelineManager:
    """
    时间轴管理器

    状态的唯一写入者。advance() 是逐帧状态机；在异步模式下，
    activate() 启动一个等待帧时钟的任务，deactivate() 取消该任务，
    再次激活时沿用第一次记录的起始时间。
    """

    def __init__(self, stroke_duration_millis: int = 2000, fill_duration_millis: int = 8000):
        """
        初始化时间轴

        Args:
            stroke_duration_millis (int): 描边阶段时长
            fill_duration_millis (int): 填充阶段时长
        """
        self.stroke_duration_millis = stroke_duration_millis
        self.fill_duration_millis = fill_duration_millis
        self.logger = logging.getLogger(__name__)

        self._state = AnimationState()
        self.lifecycle_state = LifecycleState.INACTIVE
        self.start_time: Optional[int] = None
        self.frames_processed = 0

        # 帧循环
        self._clock: Optional[FrameClock] = None
        self._task: Optional[asyncio.Task] = None
        self._finished = asyncio.Event()

        # 状态订阅者
        self._subscribers: List[StateCallback] = []

    @property
    def total_duration_millis(self) -> int:
        return self.stroke_duration_millis + self.fill_duration_millis

    @property
    def state(self) -> AnimationState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self.lifecycle_state is LifecycleState.ACTIVE

    @property
    def is_running(self) -> bool:
        """帧循环任务是否在运行"""
        return self._task is not None and not self._task.done()

    def keep_drawing(self, elapsed_time: int) -> bool:
        return elapsed_time < self.total_duration_millis

    def subscribe(self, callback: StateCallback) -> Callable[[], None]:
        """
        订阅状态变化

        Args:
            callback: 每次状态更新时以新快照调用

        Returns:
            Callable[[], None]: 取消订阅函数
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, state: AnimationState):
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception as e:
                self.logger.error(f"Error in timeline subscriber: {str(e)}")

    def advance(self, frame_time_millis: int) -> bool:
        """
        处理一帧

        Args:
            frame_time_millis (int): 帧时间戳

        Returns:
            bool: 是否需要继续接收帧
        """
        if self._state.is_finished:
            return False

        if not self.is_active:
            return True

        if self.start_time is None:
            self.start_time = frame_time_millis
            self.logger.debug(f"Timeline started at frame time {frame_time_millis}ms")
            return True

        elapsed_time = max(0, frame_time_millis - self.start_time)
        previous = self._state
        phase = previous.phase

        if elapsed_time > self.stroke_duration_millis and phase < AnimationPhase.FILL_STARTED:
            phase = AnimationPhase.FILL_STARTED

        keep_drawing = self.keep_drawing(elapsed_time)
        if not keep_drawing:
            phase = AnimationPhase.FINISHED

        self._state = AnimationState(phase, elapsed_time)
        self.frames_processed += 1

        if phase is not previous.phase:
            self.logger.info(f"Animation phase {previous.phase.name} -> {phase.name} "
                             f"at {elapsed_time}ms")

        self._publish(self._state)

        if not keep_drawing:
            self._finished.set()
        return keep_drawing

    def attach_clock(self, clock: FrameClock):
        """
        绑定帧时钟（异步模式）

        Args:
            clock: 帧时钟
        """
        if self.is_running:
            raise RuntimeError("cannot replace the frame clock while the frame loop is running")
        self._clock = clock

    def set_lifecycle_state(self, lifecycle_state: LifecycleState):
        if lifecycle_state is LifecycleState.ACTIVE:
            self.activate()
        else:
            self.deactivate()

    def activate(self):
        """
        宿主进入激活状态

        已绑定帧时钟时启动（或恢复）帧循环任务，需在事件循环内调用
        """
        if self.lifecycle_state is not LifecycleState.ACTIVE:
            self.logger.debug("Timeline activated")
        self.lifecycle_state = LifecycleState.ACTIVE

        if self._clock is None or self._state.is_finished or self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run_loop())

    def deactivate(self):
        """
        宿主离开激活状态

        取消帧循环任务，释放对帧时钟的等待；起始时间保留
        """
        if self.lifecycle_state is LifecycleState.ACTIVE:
            self.logger.debug("Timeline deactivated")
        self.lifecycle_state = LifecycleState.INACTIVE

        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run_loop(self):
        clock = self._clock
        try:
            while True:
                frame_time = await clock.next_frame()
                if not self.advance(frame_time):
                    break
        except asyncio.CancelledError:
            self.logger.debug("Frame loop suspended")
            raise
        self.logger.debug(f"Frame loop exited after {self.frames_processed} frames")

    async def wait_until_finished(self):
        """等待动画进入结束阶段"""
        await self._finished.wait()

    async def run(self, clock: FrameClock):
        """
        绑定时钟、激活并运行到结束

        Args:
            clock: 帧时钟
        """
        self.attach_clock(clock)
        self.activate()
        try:
            await self.wait_until_finished()
        finally:
            self.deactivate()
