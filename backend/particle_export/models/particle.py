"""
粒子模型定义。
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass
class Particle:
    """存活粒子的运行时状态。"""

    id: int  # 单调递增，永不复用
    x: float  # 位置（画面坐标）
    y: float
    vx: float  # 速度
    vy: float
    life: float  # 剩余寿命（秒）
    max_life: float  # 初始寿命（秒）
    base_speed: float  # 生成时的初速度大小
    spawn_time: float  # 生成时刻（模拟时钟）
    rotation: float = 0.0  # 旋转（弧度）
    scale: float = 1.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    color: Tuple[int, int, int] = (255, 255, 255)
    alpha: float = 1.0

    @property
    def age(self) -> float:
        """归一化年龄 t = 1 - life / max_life。"""
        if self.max_life <= 0:
            return 1.0
        return 1.0 - self.life / self.max_life
