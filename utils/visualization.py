# -*- coding: utf-8 -*-
"""
可视化工具

提供颜色解析以及动画进度曲线的绘制
"""

import logging
from pathlib import Path
from typing import Sequence, Tuple, Union

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib import colors as mcolors
import numpy as np

ColorLike = Union[str, Sequence[int]]


class ColorUtils:
    """
    颜色工具类

    提供颜色解析与转换功能
    """

    @staticmethod
    def parse_color(value: ColorLike) -> Tuple[int, int, int]:
        """
        解析颜色

        Args:
            value: '#RRGGBB'、'#RGB'、颜色名称（如 'magenta'、'darkgray'）或 RGB 序列 (0-255)

        Returns:
            Tuple[int, int, int]: RGB 颜色值 (0-255)

        Raises:
            ValueError: 无法识别的颜色
        """
        if isinstance(value, str):
            try:
                r, g, b = mcolors.to_rgb(value.strip().lower())
            except ValueError:
                raise ValueError(f"unrecognized color '{value}'") from None
            return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))

        components = tuple(value)
        if len(components) != 3 or not all(0 <= int(c) <= 255 for c in components):
            raise ValueError(f"color must have three components in 0-255, got {value!r}")
        return tuple(int(c) for c in components)

    @staticmethod
    def to_hex(color: Tuple[int, int, int]) -> str:
        """RGB 转十六进制字符串"""
        return '#{:02x}{:02x}{:02x}'.format(*color)


def plot_animation_progress(loader, output_path: str, step_millis: int = 20) -> bool:
    """
    绘制描边节点数与填充进度随时间变化的曲线

    Args:
        loader: FillableLoader 实例
        output_path (str): 图片输出路径
        step_millis (int): 采样间隔

    Returns:
        bool: 是否成功保存
    """
    logger = logging.getLogger(__name__)
    timeline = loader.timeline
    times = np.arange(0, timeline.total_duration_millis + step_millis, step_millis)
    progress = [loader.progress(int(t)) for t in times]

    fig, ax_nodes = plt.subplots(figsize=(10, 5))
    try:
        node_count = len(loader.path)
        ax_nodes.plot(times, [p.nodes_to_draw for p in progress],
                      color=ColorUtils.to_hex(loader.stroke_animator.stroke_color),
                      label='nodes drawn')
        ax_nodes.set_xlabel('elapsed time (ms)')
        ax_nodes.set_ylabel(f'nodes drawn (of {node_count})')
        ax_nodes.axvline(timeline.stroke_duration_millis, color='gray', linestyle='--', linewidth=1)

        ax_fill = ax_nodes.twinx()
        ax_fill.plot(times, [p.fill_fraction for p in progress],
                     color=ColorUtils.to_hex(loader.flood_renderer.fill_color),
                     label='fill fraction')
        ax_fill.set_ylabel('fill fraction')
        ax_fill.set_ylim(0, 1.05)

        ax_nodes.set_title('Loader animation progress')
        fig.legend(loc='lower right')
        fig.tight_layout()

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=100)
        logger.info(f"Progress plot saved to {output_path}")
        return True

    except OSError as e:
        logger.error(f"Error saving progress plot: {str(e)}")
        return False
    finally:
        plt.close(fig)
