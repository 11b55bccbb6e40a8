"""
确定性二维噪声。

基于正弦哈希，输出只依赖 (x, y, time)，不读取任何全局随机源。
"""

import math
from typing import Tuple


def simple_noise(x: float, y: float) -> float:
    """哈希噪声，取值 [0, 1)。"""
    n = math.sin(x * 12.9898 + y * 78.233) * 43758.5453
    return n - math.floor(n)


def noise_2d(x: float, y: float, time: float) -> Tuple[float, float]:
    """
    噪声力场。

    方向与强度分别取自两次独立的哈希采样。

    Args:
        x: 采样点 x（位置 × 频率）
        y: 采样点 y（位置 × 频率）
        time: 采样时间（时钟 × 噪声速度）

    Returns:
        (fx, fy) 力向量，模长 [0, 1)
    """
    angle = simple_noise(x, y + time) * math.pi * 2
    strength = simple_noise(x + 100, y + 100 + time)
    return math.cos(angle) * strength, math.sin(angle) * strength
