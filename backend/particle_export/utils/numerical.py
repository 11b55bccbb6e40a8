"""
数值计算工具。

提供插值、截断、容错数值解析等功能。
"""

import math
from typing import Any, Tuple


def clamp01(value: float) -> float:
    """截断到 [0, 1]。"""
    return max(0.0, min(1.0, value))


def lerp(a: float, b: float, t: float) -> float:
    """
    线性插值。

    Args:
        a: 起始值
        b: 结束值
        t: 插值系数

    Returns:
        a + (b - a) * t
    """
    return a + (b - a) * t


def lerp_color(
    start: Tuple[int, int, int], end: Tuple[int, int, int], t: float
) -> Tuple[int, int, int]:
    """RGB 颜色逐通道线性插值，结果取整。"""
    return tuple(int(round(lerp(s, e, t))) for s, e in zip(start, end))


def ordered_range(low: float, high: float) -> Tuple[float, float]:
    """返回有序区间 (min, max)，用于容忍上下限颠倒的配置。"""
    if low > high:
        return high, low
    return low, high


def round_to(value: float, digits: int) -> float:
    """四舍五入到固定小数位，并消除 -0.0。"""
    rounded = round(value, digits)
    return rounded + 0.0 if rounded == 0 else rounded


def parse_numeric(value: Any, previous: float) -> float:
    """
    容错数值解析。

    无法解析或非有限值时回退到上一次的有效值，而不是抛出异常。

    Args:
        value: 用户输入（字符串或数值）
        previous: 上一次的有效值

    Returns:
        解析后的数值
    """
    if isinstance(value, bool):
        return previous
    try:
        number = float(value)
    except (TypeError, ValueError):
        return previous
    if not math.isfinite(number):
        return previous
    return number
