"""
动画烘焙服务。

用独立的模拟器实例按固定帧率推进，逐帧记录存活粒子相对发射器原点的快照。
"""

import logging
import math
from typing import Optional

from particle_export.models.frame import BakedAnimation, BakedFrame, ParticleSnapshot
from particle_export.models.particle import Particle
from particle_export.schemas.base import ParticleSettings
from particle_export.services.simulator import ParticleSimulator

logger = logging.getLogger(__name__)


def get_frame_count(settings: ParticleSettings) -> int:
    """烘焙帧数 ceil(duration * fps)，容忍浮点误差（如 0.1 * 30）。"""
    return max(1, math.ceil(settings.duration * settings.fps - 1e-9))


def snapshot_particle(
    particle: Particle, origin_x: float, origin_y: float
) -> ParticleSnapshot:
    """生成粒子快照：位置相对发射器原点，旋转换算为度。"""
    return ParticleSnapshot(
        x=particle.x - origin_x,
        y=particle.y - origin_y,
        rotation=math.degrees(particle.rotation),
        scale=particle.scale,
        scale_x=particle.scale_x,
        scale_y=particle.scale_y,
        alpha=particle.alpha,
        color=particle.color,
        life=particle.life,
        max_life=particle.max_life,
    )


def bake_particle_animation(
    settings: ParticleSettings, seed: Optional[int] = None
) -> BakedAnimation:
    """
    烘焙粒子动画。

    每次调用都新建模拟器（与实时预览实例互不共享状态），
    从 reset() 状态开始，以 dt = 1 / fps 步进 ceil(duration * fps) 次。
    帧时间取步进后的模拟时钟，因此最后一帧时间等于 duration。

    Args:
        settings: 粒子配置
        seed: 随机种子，None 时使用配置中的种子

    Returns:
        烘焙结果
    """
    simulator = ParticleSimulator(settings, seed=seed)
    frame_count = get_frame_count(settings)
    dt = 1.0 / settings.fps
    origin = settings.emitter.position

    frames = []
    for _ in range(frame_count):
        simulator.update(dt)
        frames.append(
            BakedFrame(
                time=simulator.time,
                particles={
                    p.id: snapshot_particle(p, origin.x, origin.y)
                    for p in simulator.particles
                },
            )
        )

    baked = BakedAnimation(frames=frames, fps=settings.fps, duration=settings.duration)
    logger.info(
        f"Baked {baked.frame_count} frames at {settings.fps} fps, "
        f"{simulator.next_particle_id} particles spawned"
    )
    return baked
