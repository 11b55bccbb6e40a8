"""
烘焙帧模型定义。

粒子轨迹是稀疏、参差的时间序列：每帧只保存当帧存活粒子的快照，
以稳定的粒子 ID 为键；缺席表示"尚未生成"或"已死亡"。
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ParticleSnapshot:
    """某一帧某个粒子的变换快照（相对发射器原点）。"""

    x: float
    y: float
    rotation: float  # 度
    scale: float
    scale_x: float
    scale_y: float
    alpha: float
    color: Tuple[int, int, int]
    life: float
    max_life: float


@dataclass
class BakedFrame:
    """某一离散时刻的全部存活粒子。"""

    time: float  # 模拟时钟（秒）
    particles: Dict[int, ParticleSnapshot] = field(default_factory=dict)

    @property
    def particle_ids(self) -> List[int]:
        """当帧存活粒子 ID（升序）。"""
        return sorted(self.particles)

    def get(self, particle_id: int) -> Optional[ParticleSnapshot]:
        return self.particles.get(particle_id)


@dataclass
class BakedAnimation:
    """烘焙结果：按时间排序的帧序列。"""

    frames: List[BakedFrame]
    fps: int
    duration: float

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    @property
    def times(self) -> List[float]:
        return [frame.time for frame in self.frames]

    @property
    def particle_ids(self) -> List[int]:
        """任意一帧中出现过的全部粒子 ID（升序）。"""
        ids = set()
        for frame in self.frames:
            ids.update(frame.particles)
        return sorted(ids)

    def get_track(self, particle_id: int) -> List[Optional[ParticleSnapshot]]:
        """获取指定粒子的逐帧快照，缺席的帧为 None。"""
        return [frame.get(particle_id) for frame in self.frames]
