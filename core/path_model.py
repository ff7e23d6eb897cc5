# -*- coding: utf-8 -*-
"""
矢量路径模型

基于 svgpathtools 解析 SVG 路径数据，按节点折线化以便逐步描边与填充
"""

import math
import re
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from svgpathtools import Arc, CubicBezier, Line, Path, QuadraticBezier, parse_path

from utils.math_utils import MathUtils

logger = logging.getLogger(__name__)

# 线段类型对应的节点类别
SEGMENT_KINDS: Dict[type, str] = {
    Line: 'L',
    CubicBezier: 'C',
    QuadraticBezier: 'Q',
    Arc: 'A',
}

_INVALID_CHAR_RE = re.compile(r'[^MmLlHhVvCcSsQqTtAaZz0-9eE.,+\-\s]')
_COMMAND_SPLIT_RE = re.compile(r'([MmLlHhVvCcSsQqTtAaZz])')
_NUMBER_RE = re.compile(r'[\s,]*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)')
_FLAG_RE = re.compile(r'[\s,]*([01])')
# rx ry rotation large-arc sweep x y
_ARC_ARGUMENTS = (_NUMBER_RE,) * 3 + (_FLAG_RE,) * 2 + (_NUMBER_RE,) * 2


@dataclass(frozen=True)
class Size:
    """尺寸"""
    width: float
    height: float


@dataclass(frozen=True)
class PathNode:
    """
    路径节点

    每个子路径以一个 'M' 节点（起点）开头，之后每条线段一个节点：
    'L' 直线、'C' 三次贝塞尔、'Q' 二次贝塞尔、'A' 椭圆弧。
    """
    kind: str
    point: complex                 # 'M' 为起点，其余为终点
    segment: Optional[Any] = None  # svgpathtools 线段

    @property
    def xy(self) -> Tuple[float, float]:
        return (self.point.real, self.point.imag)


class Polyline(NamedTuple):
    """折线化后的子路径"""
    points: np.ndarray
    closed: bool


def _to_xy(points: Sequence[complex]) -> np.ndarray:
    values = np.asarray(points, dtype=np.complex128).reshape(-1)
    return np.column_stack([values.real, values.imag])


def _separate_arc_args(args: str) -> str:
    values = []
    position = 0
    while args[position:].strip(' ,\t\r\n'):
        for pattern in _ARC_ARGUMENTS:
            match = pattern.match(args, position)
            if match is None:
                raise ValueError(f"invalid arc arguments '{args.strip()}'")
            values.append(match.group(1))
            position = match.end()
    return ' ' + ' '.join(values) + ' '


def _separate_arc_flags(path_data: str) -> str:
    """
    在弧线标志之间补上分隔符

    SVG 允许 "a5 5 0 1010 10" 这样不带分隔的标志位，svgpathtools 会把 1010 当成一个数
    """
    parts = _COMMAND_SPLIT_RE.split(path_data)
    command = ''
    for i, part in enumerate(parts):
        if _COMMAND_SPLIT_RE.fullmatch(part):
            command = part
        elif command in ('A', 'a'):
            parts[i] = _separate_arc_args(part)
    return ''.join(parts)


class PathParser:
    """
    SVG 路径数据解析器

    支持 M L H V C S Q T A Z 命令（含相对坐标与参数隐式重复）
    """

    @classmethod
    def parse(cls, path_data: str) -> List[PathNode]:
        """
        解析路径数据字符串

        Args:
            path_data (str): SVG 路径数据，例如 "M0 0 L10 10 Z"

        Returns:
            List[PathNode]: 节点列表

        Raises:
            ValueError: 字符非法、命令缺少参数或以数字开头
        """
        invalid = _INVALID_CHAR_RE.search(path_data)
        if invalid:
            raise ValueError(f"invalid path data near '{invalid.group(0)}'")

        try:
            path = parse_path(_separate_arc_flags(path_data))
        except (ValueError, IndexError) as e:
            raise ValueError(f"invalid path data '{path_data.strip()[:40]}': {str(e)}") from None

        nodes: List[PathNode] = []
        for subpath in path.continuous_subpaths():
            if len(subpath) == 0:
                continue
            nodes.append(PathNode('M', subpath.start))
            nodes.extend(PathNode(SEGMENT_KINDS[type(segment)], segment.end, segment)
                         for segment in subpath)

        logger.debug(f"Parsed {len(nodes)} path nodes")
        return nodes


class VectorPath:
    """
    矢量路径

    将节点序列折线化，支持按节点前缀取出折线（用于逐步描边）
    以及取出全部闭合多边形（用于填充）。
    """

    def __init__(self, nodes: Sequence[PathNode], segment_length: float = 4.0):
        """
        初始化矢量路径

        Args:
            nodes: 路径节点
            segment_length (float): 曲线折线化时每段的近似长度
        """
        self.nodes: Tuple[PathNode, ...] = tuple(nodes)
        self.segment_length = segment_length

        # 每个节点的折线点与所属子路径
        self.node_points: List[np.ndarray] = [self._flatten(node) for node in self.nodes]
        self.node_subpaths: List[int] = []
        self.subpath_closed: List[bool] = []
        self.subpath_last_node: List[int] = []
        self._index_subpaths()

    @classmethod
    def from_path_data(cls, path_data: str, **kwargs) -> 'VectorPath':
        return cls(PathParser.parse(path_data), **kwargs)

    def __len__(self) -> int:
        return len(self.nodes)

    def _flatten(self, node: PathNode) -> np.ndarray:
        segment = node.segment
        if segment is None or isinstance(segment, Line):
            return _to_xy([node.point])

        count = int(MathUtils.clamp(math.ceil(segment.length() / self.segment_length), 4, 64))
        points = _to_xy([segment.point(float(t)) for t in np.linspace(0.0, 1.0, count + 1)[1:]])
        points[-1] = node.xy
        return points

    def _index_subpaths(self):
        start = None
        for index, node in enumerate(self.nodes):
            if node.kind == 'M' or not self.node_subpaths:
                start = node.point
                self.subpath_closed.append(False)
                self.subpath_last_node.append(index)
            subpath = len(self.subpath_closed) - 1
            self.node_subpaths.append(subpath)
            self.subpath_last_node[subpath] = index
            if node.kind != 'M':
                self.subpath_closed[subpath] = node.point == start

    def polylines(self, limit: Optional[int] = None) -> List[Polyline]:
        """
        获取前 limit 个节点组成的折线

        Args:
            limit (int, optional): 节点数，None 表示全部

        Returns:
            List[Polyline]: 每个子路径一条折线（只有起点的子路径被忽略）
        """
        if limit is None:
            limit = len(self.nodes)
        limit = min(limit, len(self.nodes))
        if limit <= 0:
            return []

        grouped: Dict[int, List[np.ndarray]] = {}
        for index in range(limit):
            grouped.setdefault(self.node_subpaths[index], []).append(self.node_points[index])

        result = []
        for subpath, parts in grouped.items():
            points = np.concatenate(parts, axis=0)
            if len(points) < 2:
                continue
            # 子路径全部绘出后才闭合
            closed = self.subpath_closed[subpath] and self.subpath_last_node[subpath] < limit
            result.append(Polyline(points, closed))
        return result

    def fill_polygons(self) -> List[np.ndarray]:
        """
        获取填充用的闭合多边形

        Returns:
            List[np.ndarray]: 多边形顶点数组（隐式闭合，少于 3 个点的子路径被忽略）
        """
        return [line.points for line in self.polylines() if len(line.points) >= 3]

    def bounds(self) -> Tuple[float, float, float, float]:
        """返回 (min_x, min_y, max_x, max_y)"""
        segments = [node.segment for node in self.nodes if node.segment is not None]
        if not segments:
            return (0.0, 0.0, 0.0, 0.0)
        min_x, max_x, min_y, max_y = Path(*segments).bbox()
        return (float(min_x), float(min_y), float(max_x), float(max_y))
