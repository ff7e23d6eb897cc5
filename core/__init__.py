# -*- coding: utf-8 -*-
"""
核心模块

包含加载动画的路径模型、画布与动画实现
"""

__version__ = '1.0.0'

from .path_model import PathNode, PathParser, Size, VectorPath
from .canvas import Canvas
from .silhouette import CAT_VECTOR_SIZE, cat_path, cat_path_nodes
from .animation import FillableLoader, LoaderConfig, TimelineManager, AnimationPhase

__all__ = [
    'PathNode',
    'PathParser',
    'Size',
    'VectorPath',
    'Canvas',
    'CAT_VECTOR_SIZE',
    'cat_path',
    'cat_path_nodes',
    'FillableLoader',
    'LoaderConfig',
    'TimelineManager',
    'AnimationPhase'
]
