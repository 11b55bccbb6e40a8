"""
发射器形状采样服务。

按形状分派到各自的采样函数，每个函数只负责计算相对发射器原点的偏移，
并根据发射模式（区域 / 边缘）选择采样策略。坐标系 y 轴向下。
"""

import math
from typing import Callable, Dict, Tuple

import numpy as np

from particle_export.schemas.base import EmissionMode, EmitterConfig, EmitterShape

Offset = Tuple[float, float]
ShapeSampler = Callable[[EmitterConfig, np.random.Generator], Offset]


def rectangle_edge_point(width: float, height: float, s: float) -> Offset:
    """
    矩形边缘上弧长参数 s 对应的点。

    周长按 上 → 右 → 下 → 左 顺序展开，从左上角开始顺时针。

    Args:
        width: 矩形宽度
        height: 矩形高度
        s: 弧长参数 [0, 2 * (w + h))

    Returns:
        相对中心的偏移 (dx, dy)
    """
    w, h = width, height
    if s < w:
        return s - w / 2, -h / 2
    if s < w + h:
        return w / 2, (s - w) - h / 2
    if s < 2 * w + h:
        return w / 2 - (s - w - h), h / 2
    return -w / 2, h / 2 - (s - 2 * w - h)


def rounded_rect_perimeter(width: float, height: float, radius: float) -> float:
    """圆角矩形周长（四段直边 + 四段四分之一圆弧）。"""
    straight_w = width - 2 * radius
    straight_h = height - 2 * radius
    return 2 * (straight_w + straight_h) + 2 * math.pi * radius


def clamp_corner_radius(width: float, height: float, radius: float) -> float:
    """圆角半径截断到 min(w, h) / 2。"""
    return max(0.0, min(radius, width / 2, height / 2))


def rounded_rect_edge_point(
    width: float, height: float, radius: float, s: float
) -> Offset:
    """
    圆角矩形轮廓上弧长参数 s 对应的点。

    分 8 段：上直边、右上弧、右直边、右下弧、下直边、左下弧、左直边、左上弧。
    弧段上的点为 该角圆心 + r * (cos θ, sin θ)，θ 扫过该角的四分之一圆。

    Args:
        width: 宽度
        height: 高度
        radius: 圆角半径（已截断）
        s: 弧长参数 [0, perimeter)

    Returns:
        相对中心的偏移 (dx, dy)
    """
    w, h, r = width, height, radius
    straight_w = w - 2 * r
    straight_h = h - 2 * r
    arc = math.pi * r / 2

    right_x = w / 2 - r
    left_x = -w / 2 + r
    top_y = -h / 2 + r
    bottom_y = h / 2 - r

    def on_arc(cx: float, cy: float, start: float, u: float) -> Offset:
        theta = start + u / r
        return cx + r * math.cos(theta), cy + r * math.sin(theta)

    segments = (
        (straight_w, lambda u: (left_x + u, -h / 2)),
        (arc, lambda u: on_arc(right_x, top_y, -math.pi / 2, u)),
        (straight_h, lambda u: (w / 2, top_y + u)),
        (arc, lambda u: on_arc(right_x, bottom_y, 0.0, u)),
        (straight_w, lambda u: (right_x - u, h / 2)),
        (arc, lambda u: on_arc(left_x, bottom_y, math.pi / 2, u)),
        (straight_h, lambda u: (-w / 2, bottom_y - u)),
        (arc, lambda u: on_arc(left_x, top_y, math.pi, u)),
    )

    for length, point_at in segments:
        if length > 0 and s < length:
            return point_at(s)
        s -= length

    # 浮点误差落在末尾时，回到起点
    return left_x, -h / 2


def _sample_point(em: EmitterConfig, rng: np.random.Generator) -> Offset:
    return 0.0, 0.0


def _sample_line(em: EmitterConfig, rng: np.random.Generator) -> Offset:
    angle_rad = math.radians(em.angle)
    distance = (rng.random() - 0.5) * em.line_length
    return math.cos(angle_rad) * distance, math.sin(angle_rad) * distance


def _sample_circle(em: EmitterConfig, rng: np.random.Generator) -> Offset:
    # 区域模式按极坐标均匀采样半径，样本偏向圆心（非面积均匀）
    angle = rng.random() * math.pi * 2
    if em.emission_mode == EmissionMode.AREA:
        radius = rng.random() * em.shape_radius
    else:
        radius = em.shape_radius
    return math.cos(angle) * radius, math.sin(angle) * radius


def _sample_rectangle(em: EmitterConfig, rng: np.random.Generator) -> Offset:
    w, h = em.shape_width, em.shape_height
    if em.emission_mode == EmissionMode.AREA:
        return (rng.random() - 0.5) * w, (rng.random() - 0.5) * h

    perimeter = 2 * (w + h)
    if perimeter <= 0:
        return 0.0, 0.0
    return rectangle_edge_point(w, h, rng.random() * perimeter)


def _sample_rounded_rect(em: EmitterConfig, rng: np.random.Generator) -> Offset:
    w, h = em.shape_width, em.shape_height
    if em.emission_mode == EmissionMode.AREA:
        # 区域模式按普通矩形采样，不剔除圆角外的点
        return (rng.random() - 0.5) * w, (rng.random() - 0.5) * h

    r = clamp_corner_radius(w, h, em.round_radius)
    perimeter = rounded_rect_perimeter(w, h, r)
    if perimeter <= 0:
        return 0.0, 0.0
    return rounded_rect_edge_point(w, h, r, rng.random() * perimeter)


SHAPE_SAMPLERS: Dict[EmitterShape, ShapeSampler] = {
    EmitterShape.POINT: _sample_point,
    EmitterShape.LINE: _sample_line,
    EmitterShape.CIRCLE: _sample_circle,
    EmitterShape.RECTANGLE: _sample_rectangle,
    EmitterShape.ROUNDED_RECT: _sample_rounded_rect,
}


def sample_spawn_offset(em: EmitterConfig, rng: np.random.Generator) -> Offset:
    """
    按发射器形状采样生成位置偏移。

    Args:
        em: 发射器配置
        rng: 随机数生成器

    Returns:
        相对发射器原点的偏移 (dx, dy)
    """
    return SHAPE_SAMPLERS[em.shape](em, rng)
