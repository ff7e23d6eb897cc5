# -*- coding: utf-8 -*-
"""
配置设置模块

定义加载动画、波浪填充、画布、导出与日志的各种参数和配置
"""

import logging
import os
from typing import Any, Dict, Optional

import yaml

from core.animation.animation_controller import LoaderConfig
from core.animation.animation_renderer import RenderConfig, RenderFormat
from core.animation.flood_renderer import WaveParameters
from utils.visualization import ColorUtils

logger = logging.getLogger(__name__)

SECTIONS = ('loader', 'wave', 'canvas', 'render', 'logging')


class Config:
    """
    配置管理类

    管理加载动画的所有参数配置，支持从 YAML 文件加载和默认值
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        初始化配置

        Args:
            config_path (str, optional): 配置文件路径
        """
        # 设置默认配置
        self._set_default_config()

        if config_path:
            if os.path.exists(config_path):
                self._load_config_file(config_path)
            else:
                logger.warning(f"Config file not found: {config_path}, using defaults")

    def _set_default_config(self):
        """
        设置默认配置参数
        """
        # 加载动画参数
        self.loader = {
            'stroke_color': '#444444',           # 描边颜色（深灰）
            'fill_color': 'magenta',             # 填充颜色
            'stroke_duration_millis': 2000,      # 描边时长
            'fill_duration_millis': 8000,        # 填充时长
            'stroke_width': 2.0,                 # 参考坐标下的线宽
            'easing': 'linear_out_slow_in',      # 描边缓动
        }

        # 波浪裁剪参数
        self.wave = {
            'sample_points': 128,     # 波浪边缘采样点数
            'amplitude_ratio': 0.04,  # 振幅占参考高度的比例
            'waves': 1.5,             # 宽度方向的波数
            'cycles': 2.0,            # 填充过程中的相位周期数
        }

        # 画布参数
        self.canvas = {
            'width': 480,
            'height': 480,
            'background_color': 'white',
        }

        # 导出参数
        self.render = {
            'fps': 30,
            'format': 'gif',                     # gif / mp4 / frames
            'output_path': 'output/loader.gif',
            'codec': 'mp4v',
            'hold_last_frame_millis': 500,
        }

        # 日志参数
        self.logging = {
            'log_dir': 'logs',
            'app_name': 'fillable_loader',
            'console_level': 'INFO',
            'file_level': 'DEBUG',
            'use_colors': True,
            'log_to_file': True,
        }

    def _load_config_file(self, config_path: str):
        """
        从文件加载配置

        Args:
            config_path (str): 配置文件路径
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config file {config_path}: {str(e)}")
            logger.warning("Using default configuration")
            return

        if not isinstance(config_data, dict):
            logger.warning(f"Config file {config_path} does not contain a mapping, using defaults")
            return

        self._update_config(config_data)
        logger.info(f"Loaded configuration from {config_path}")

    def _update_config(self, config_data: Dict[str, Any]):
        """
        更新配置数据

        Args:
            config_data (dict): 新的配置数据
        """
        for section, values in config_data.items():
            if hasattr(self, section) and isinstance(getattr(self, section), dict) \
                    and isinstance(values, dict):
                getattr(self, section).update(values)
            else:
                setattr(self, section, values)

    def get(self, section: str, key: str = None, default=None):
        """
        获取配置值

        Args:
            section (str): 配置段名
            key (str, optional): 配置键名
            default: 默认值

        Returns:
            配置值
        """
        if not hasattr(self, section):
            return default

        section_config = getattr(self, section)

        if key is None:
            return section_config

        if isinstance(section_config, dict):
            return section_config.get(key, default)
        return default

    def set(self, section: str, key: str, value):
        """
        设置配置值

        Args:
            section (str): 配置段名
            key (str): 配置键名
            value: 配置值
        """
        if not hasattr(self, section):
            setattr(self, section, {})

        section_config = getattr(self, section)
        if isinstance(section_config, dict):
            section_config[key] = value
        else:
            setattr(self, section, {key: value})

    def loader_config(self) -> LoaderConfig:
        """
        构建加载动画配置

        Returns:
            LoaderConfig: 颜色已解析为 RGB 的配置

        Raises:
            ValueError: 颜色或缓动名称无法识别
        """
        loader = self.loader
        wave = self.wave
        return LoaderConfig(
            stroke_color=ColorUtils.parse_color(loader['stroke_color']),
            fill_color=ColorUtils.parse_color(loader['fill_color']),
            stroke_duration_millis=int(loader['stroke_duration_millis']),
            fill_duration_millis=int(loader['fill_duration_millis']),
            stroke_width=float(loader['stroke_width']),
            background_color=ColorUtils.parse_color(self.canvas['background_color']),
            easing=loader['easing'],
            wave=WaveParameters(
                sample_points=int(wave['sample_points']),
                amplitude_ratio=float(wave['amplitude_ratio']),
                waves=float(wave['waves']),
                cycles=float(wave['cycles']),
            ),
        )

    def render_config(self) -> RenderConfig:
        """
        构建导出配置

        Returns:
            RenderConfig: 导出配置

        Raises:
            ValueError: 不支持的输出格式
        """
        render = self.render
        return RenderConfig(
            output_path=render['output_path'],
            format=RenderFormat(str(render['format']).lower()),
            fps=int(render['fps']),
            resolution=(int(self.canvas['width']), int(self.canvas['height'])),
            codec=render['codec'],
            hold_last_frame_millis=int(render['hold_last_frame_millis']),
        )

    def save_config(self, output_path: str) -> bool:
        """
        保存配置到文件

        Args:
            output_path (str): 输出文件路径

        Returns:
            bool: 是否保存成功
        """
        config_data = {section: getattr(self, section) for section in SECTIONS}

        try:
            os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(config_data, f, default_flow_style=False,
                               allow_unicode=True, indent=2)
        except OSError as e:
            logger.error(f"Failed to save config: {str(e)}")
            return False

        logger.info(f"Configuration saved to {output_path}")
        return True

    def __str__(self):
        """
        返回配置的字符串表示
        """
        config_str = "Configuration Settings:\n"
        for attr_name in dir(self):
            if not attr_name.startswith('_') and not callable(getattr(self, attr_name)):
                attr_value = getattr(self, attr_name)
                if isinstance(attr_value, dict):
                    config_str += f"\n{attr_name}:\n"
                    for key, value in attr_value.items():
                        config_str += f"  {key}: {value}\n"
        return config_str
