"""
粒子模拟服务。

固定步长推进的粒子系统：按发射类型生成粒子，逐步施加生命周期曲线驱动的力场，
并回收寿命耗尽的粒子。同一种子下结果完全可复现。
"""

import logging
import math
from typing import List, Optional

import numpy as np

from particle_export.models.particle import Particle
from particle_export.schemas.base import EmissionType, ParticleSettings
from particle_export.services.curve import evaluate_curve
from particle_export.services.emitter_shapes import sample_spawn_offset
from particle_export.utils.noise import noise_2d
from particle_export.utils.numerical import lerp, lerp_color, ordered_range

logger = logging.getLogger(__name__)

# 涡旋力随距离衰减系数
VORTEX_FALLOFF = 0.001
# 涡旋径向（向心）分量比例
VORTEX_RADIAL_FACTOR = 0.3


class ParticleSimulator:
    """
    粒子模拟器类。

    内部维护存活粒子列表与发射状态，每次调用 update(dt) 推进一个时间步。
    粒子 ID 单调递增，在 reset() 之前永不复用。
    """

    def __init__(self, settings: ParticleSettings, seed: Optional[int] = None):
        """
        初始化粒子模拟器。

        Args:
            settings: 粒子配置（模拟期间视为只读）
            seed: 随机种子，None 时使用配置中的种子
        """
        self.settings = settings
        self.seed = seed if seed is not None else settings.seed
        self.reset()

    def reset(self) -> None:
        """清空粒子与发射状态，并按种子重建随机数生成器。"""
        self.particles: List[Particle] = []
        self.time = 0.0
        self.spawn_accumulator = 0.0
        self.next_particle_id = 0
        self.burst_cycle_index = 0
        self.last_burst_time = 0.0
        self.rng = np.random.default_rng(self.seed)

    @property
    def particle_count(self) -> int:
        """当前存活粒子数量。"""
        return len(self.particles)

    @property
    def is_full(self) -> bool:
        return len(self.particles) >= self.settings.emitter.max_particles

    def update(self, dt: float) -> None:
        """
        推进一个时间步。

        顺序：时钟前进 → 发射 → 更新存活粒子 → 回收死亡粒子。

        Args:
            dt: 时间步长（秒）
        """
        self.time += dt
        self._emit(dt)

        survivors = []
        for particle in self.particles:
            particle.life -= dt
            if particle.life <= 0:
                continue
            self._update_particle(particle, dt)
            survivors.append(particle)
        self.particles = survivors

    def _emit(self, dt: float) -> None:
        em = self.settings.emitter

        if em.emission_type == EmissionType.CONTINUOUS:
            self._emit_at_rate(dt)

        elif em.emission_type == EmissionType.BURST:
            if self.burst_cycle_index >= em.burst_cycles:
                return
            due = (
                self.burst_cycle_index == 0
                or self.time - self.last_burst_time >= em.burst_interval
            )
            if not due:
                return
            spawned = 0
            for _ in range(em.burst_count):
                if self.is_full:
                    break
                self.spawn_particle()
                spawned += 1
            if spawned < em.burst_count:
                logger.debug(
                    f"Burst {self.burst_cycle_index} truncated at "
                    f"{spawned}/{em.burst_count} by particle limit"
                )
            self.burst_cycle_index += 1
            self.last_burst_time = self.time

        elif em.emission_type == EmissionType.DURATION:
            if em.duration_start <= self.time <= em.duration_end:
                self._emit_at_rate(dt)

    def _emit_at_rate(self, dt: float) -> None:
        em = self.settings.emitter
        interval = 1.0 / em.rate
        self.spawn_accumulator += dt
        while self.spawn_accumulator >= interval and not self.is_full:
            self.spawn_particle()
            self.spawn_accumulator -= interval

    def spawn_particle(self) -> Particle:
        """
        生成一个新粒子并加入存活列表。

        Returns:
            新粒子
        """
        s = self.settings
        em = s.emitter
        rng = self.rng

        dx, dy = sample_spawn_offset(em, rng)

        angle = math.radians(em.angle + (rng.random() - 0.5) * em.angle_spread)
        speed_low, speed_high = ordered_range(em.speed_min, em.speed_max)
        speed = speed_low + rng.random() * (speed_high - speed_low)
        life_low, life_high = ordered_range(s.life_time_min, s.life_time_max)
        life = life_low + rng.random() * (life_high - life_low)

        particle = Particle(
            id=self.next_particle_id,
            x=em.position.x + dx,
            y=em.position.y + dy,
            vx=math.cos(angle) * speed,
            vy=math.sin(angle) * speed,
            life=life,
            max_life=life,
            base_speed=speed,
            spawn_time=self.time,
            color=(s.color_start.r, s.color_start.g, s.color_start.b),
            alpha=s.alpha_start,
        )
        self.next_particle_id += 1
        self.particles.append(particle)
        return particle

    def _update_particle(self, p: Particle, dt: float) -> None:
        s = self.settings
        t = p.age

        # 1. 尺寸
        p.scale = evaluate_curve(s.size_over_lifetime, t)
        if s.non_uniform_scale:
            p.scale_x = p.scale * s.scale_ratio_x
            p.scale_y = p.scale * s.scale_ratio_y
        else:
            p.scale_x = p.scale
            p.scale_y = p.scale

        # 2. 重力（按重量曲线加权）
        weight = evaluate_curve(s.weight_over_lifetime, t)
        p.vy += s.gravity_y * weight * dt

        # 3. 噪声场
        noise_strength = evaluate_curve(s.noise_strength_over_lifetime, t)
        if noise_strength != 0:
            fx, fy = noise_2d(
                p.x * s.noise_frequency,
                p.y * s.noise_frequency,
                self.time * s.noise_speed,
            )
            p.vx += fx * noise_strength * dt
            p.vy += fy * noise_strength * dt

        # 4. 吸引点
        attraction = evaluate_curve(s.attraction_over_lifetime, t)
        if attraction != 0:
            ax = s.attraction_point.x - p.x
            ay = s.attraction_point.y - p.y
            dist = math.hypot(ax, ay)
            if dist > 0:
                p.vx += ax / dist * attraction * dt
                p.vy += ay / dist * attraction * dt

        # 5. 涡旋（切向 + 少量向心）
        vortex = evaluate_curve(s.vortex_strength_over_lifetime, t)
        if vortex != 0:
            dx = s.vortex_point.x - p.x
            dy = s.vortex_point.y - p.y
            dist = math.hypot(dx, dy)
            if dist > 0:
                nx = dx / dist
                ny = dy / dist
                falloff = 1.0 / (1.0 + dist * VORTEX_FALLOFF)
                p.vx += -ny * vortex * falloff * dt
                p.vy += nx * vortex * falloff * dt
                p.vx += nx * vortex * VORTEX_RADIAL_FACTOR * falloff * dt
                p.vy += ny * vortex * VORTEX_RADIAL_FACTOR * falloff * dt

        # 6. 阻力
        p.vx *= s.drag
        p.vy *= s.drag

        # 7. 位置（速度曲线只缩放位移，不改变速度本身）
        speed_multiplier = evaluate_curve(s.speed_over_lifetime, t)
        p.x += p.vx * speed_multiplier * dt
        p.y += p.vy * speed_multiplier * dt

        # 8. 旋转（弧度）
        spin = evaluate_curve(s.spin_over_lifetime, t)
        angular_velocity = evaluate_curve(s.angular_velocity_over_lifetime, t)
        p.rotation += (spin + angular_velocity) * dt

        # 9. 透明度与颜色
        p.alpha = lerp(s.alpha_start, s.alpha_end, t)
        start = (s.color_start.r, s.color_start.g, s.color_start.b)
        end = (s.color_end.r, s.color_end.g, s.color_end.b)
        p.color = lerp_color(start, end, t)
