# -*- coding: utf-8 -*-
"""
猫咪轮廓数据

加载动画使用的矢量轮廓，坐标基于 240x240 的参考画布
"""

from functools import lru_cache
from typing import Tuple

from .path_model import PathNode, PathParser, Size, VectorPath

# 参考尺寸（路径数据的原始坐标空间）
CAT_VECTOR_SIZE = Size(240.0, 240.0)

CAT_PATH_DATA = (
    # 头和身体
    "M 62 236 "
    "C 40 214 38 166 60 134 "
    "C 70 118 78 108 76 92 "
    "L 70 36 "
    "L 98 62 "
    "C 110 58 126 58 138 62 "
    "L 166 36 "
    "L 160 92 "
    "C 158 108 166 118 176 134 "
    "C 198 166 196 214 174 236 "
    "Z "
    # 尾巴
    "M 188 236 "
    "C 210 234 230 220 228 194 "
    "C 226 174 208 166 198 174 "
    "S 216 190 212 204 "
    "C 208 216 200 222 190 224 "
    "Z "
    # 眼睛
    "M 100 92 Q 108 84 116 92 Q 108 100 100 92 Z "
    "M 122 92 q 8 -8 16 0 q -8 8 -16 0 z "
    # 鼻子
    "M 114 104 l 8 0 l -4 5 z "
    # 胡须
    "M 100 106 l -26 -4 "
    "M 100 110 l -26 4 "
    "M 138 106 l 26 -4 "
    "M 138 110 l 26 4 "
    # 地面
    "M 40 238 H 200"
)


@lru_cache(maxsize=1)
def cat_path_nodes() -> Tuple[PathNode, ...]:
    """轮廓描边使用的节点序列"""
    return tuple(PathParser.parse(CAT_PATH_DATA))


@lru_cache(maxsize=1)
def cat_path() -> VectorPath:
    """预先构建的轮廓路径（描边前缀与填充区域共用）"""
    return VectorPath(cat_path_nodes())
