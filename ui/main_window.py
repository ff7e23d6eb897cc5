# -*- coding: utf-8 -*-
"""
主窗口界面

提供加载动画的交互式预览
"""

import logging
from typing import Callable, Optional

from PyQt5.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QPushButton, QLabel, QGroupBox
)
from PyQt5.QtCore import Qt, QElapsedTimer, QTimer, pyqtSignal
from PyQt5.QtGui import QImage, QPainter

from core.canvas import Canvas
from core.animation.animation_controller import FillableLoader, LoaderConfig
from core.animation.timeline_manager import AnimationState


class LoaderWidget(QWidget):
    """
    加载动画控件

    QTimer 充当帧时钟，显示/隐藏事件驱动时间轴的激活状态
    """
    state_changed = pyqtSignal(object)

    def __init__(self, loader: FillableLoader, fps: int = 60, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.logger = logging.getLogger(__name__)
        self.fps = fps
        self.loader: Optional[FillableLoader] = None

        self._clock = QElapsedTimer()
        self._clock.start()
        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(max(1, int(1000 / fps)))
        self._frame_timer.timeout.connect(self._on_frame)

        self.setMinimumSize(240, 240)
        self.set_loader(loader)

    def set_loader(self, loader: FillableLoader):
        """
        替换当前动画

        Args:
            loader: 新的加载动画
        """
        if self.loader is not None:
            self.loader.remove_frame_callback(self._on_state_changed)
            self.loader.close()

        self.loader = loader
        self.loader.add_frame_callback(self._on_state_changed)

        if self.isVisible():
            self._start()
        self.update()

    def _start(self):
        self.loader.timeline.activate()
        if not self.loader.state.is_finished:
            self._frame_timer.start()

    def _stop(self):
        self._frame_timer.stop()
        self.loader.timeline.deactivate()

    def _on_frame(self):
        if not self.loader.timeline.advance(self._clock.elapsed()):
            self._frame_timer.stop()
            self.logger.debug("Frame timer stopped")

    def _on_state_changed(self, state: AnimationState):
        self.state_changed.emit(state)
        self.update()

    def showEvent(self, event):
        super().showEvent(event)
        self._start()

    def hideEvent(self, event):
        self._stop()
        super().hideEvent(event)

    def paintEvent(self, event):
        canvas = Canvas(self.width(), self.height(), self.loader.background_color)
        self.loader.draw(canvas)
        image = canvas.get_canvas_image()

        height, width, _ = image.shape
        q_image = QImage(image.data, width, height, 3 * width, QImage.Format_RGB888).copy()

        painter = QPainter(self)
        try:
            painter.drawImage(0, 0, q_image)
        finally:
            painter.end()


class MainWindow(QMainWindow):
    """
    主窗口
    """

    def __init__(self, loader_config: LoaderConfig, fps: int = 60,
                 loader_factory: Optional[Callable[[LoaderConfig], FillableLoader]] = None):
        super().__init__()
        self.loader_config = loader_config
        self.fps = fps
        self.loader_factory = loader_factory or FillableLoader.from_config
        self.logger = logging.getLogger(__name__)

        self._init_ui()

    def _init_ui(self):
        """
        初始化界面
        """
        self.setWindowTitle("可填充加载动画")
        self.setMinimumSize(480, 560)

        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        layout = QVBoxLayout(main_widget)

        # 动画预览区域
        preview_group = QGroupBox("动画预览")
        preview_layout = QVBoxLayout(preview_group)
        self.loader_widget = LoaderWidget(self.loader_factory(self.loader_config), self.fps)
        self.loader_widget.state_changed.connect(self._update_status)
        preview_layout.addWidget(self.loader_widget)
        layout.addWidget(preview_group, stretch=1)

        # 控制区域
        control_layout = QHBoxLayout()
        self.status_label = QLabel("STROKE_STARTED  0 ms")
        self.status_label.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        control_layout.addWidget(self.status_label, stretch=1)

        self.restart_btn = QPushButton("重新播放")
        self.restart_btn.clicked.connect(self.restart)
        control_layout.addWidget(self.restart_btn)

        layout.addLayout(control_layout)

    def restart(self):
        """
        重新开始动画
        """
        self.logger.info("Restarting loader animation")
        self.loader_widget.set_loader(self.loader_factory(self.loader_config))
        self._update_status(self.loader_widget.loader.state)

    def _update_status(self, state: AnimationState):
        self.status_label.setText(f"{state.phase.name}  {state.elapsed_time} ms")

    def closeEvent(self, event):
        self.loader_widget.loader.close()
        super().closeEvent(event)


def run_preview(loader_config: LoaderConfig, fps: int = 60) -> int:
    """
    启动预览窗口

    Args:
        loader_config: 加载动画配置
        fps (int): 预览帧率

    Returns:
        int: 应用退出码
    """
    app = QApplication.instance() or QApplication([])
    window = MainWindow(loader_config, fps)
    window.show()
    return app.exec_()
