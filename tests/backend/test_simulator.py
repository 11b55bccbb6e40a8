"""
粒子模拟与烘焙测试。
"""

import math

import numpy as np
import pytest

from particle_export.schemas.base import (
    Curve,
    EmissionMode,
    EmissionType,
    EmitterConfig,
    EmitterShape,
    ParticleSettings,
    Vec2,
)
from particle_export.services.baker import bake_particle_animation, get_frame_count
from particle_export.services.emitter_shapes import (
    clamp_corner_radius,
    rectangle_edge_point,
    rounded_rect_edge_point,
    rounded_rect_perimeter,
    sample_spawn_offset,
)
from particle_export.services.simulator import ParticleSimulator
from particle_export.utils.noise import noise_2d, simple_noise


def make_settings(**emitter_overrides) -> ParticleSettings:
    """构造测试用配置（寿命足够长，保证测试期间粒子不会死亡）。"""
    emitter = EmitterConfig(**emitter_overrides)
    return ParticleSettings(
        emitter=emitter, life_time_min=10.0, life_time_max=10.0, seed=42
    )


@pytest.mark.parametrize(
    "emission_type",
    [EmissionType.CONTINUOUS, EmissionType.BURST, EmissionType.DURATION],
)
def test_particle_count_never_exceeds_limit(emission_type):
    """测试任意发射类型下存活粒子数不超过上限。"""
    settings = make_settings(
        emission_type=emission_type,
        rate=500,
        max_particles=25,
        burst_count=40,
        burst_cycles=3,
        burst_interval=0.1,
        duration_start=0.0,
        duration_end=1.0,
    )
    simulator = ParticleSimulator(settings)
    for _ in range(90):
        simulator.update(1 / 30)
        assert simulator.particle_count <= 25


def test_continuous_scenario_population():
    """测试连续发射：2 秒 / 30 fps 烘焙 60 帧，存活数不超过 100。"""
    settings = make_settings(rate=50, max_particles=500)
    settings = settings.model_copy(update={"duration": 2.0, "fps": 30})

    baked = bake_particle_animation(settings)

    assert baked.frame_count == 60
    populations = [len(frame.particles) for frame in baked.frames]
    assert populations[-1] <= 100
    assert populations[-1] >= 98
    assert populations == sorted(populations)


def test_continuous_growth_stops_at_limit():
    """测试达到上限后不再增长。"""
    settings = make_settings(rate=50, max_particles=20)
    baked = bake_particle_animation(settings)

    populations = [len(frame.particles) for frame in baked.frames]
    assert max(populations) == 20
    first_full = populations.index(20)
    assert all(count == 20 for count in populations[first_full:])


def test_burst_spawns_exactly_cycles_times_count():
    """测试爆发发射总数为 cycles * count。"""
    settings = make_settings(
        emission_type=EmissionType.BURST,
        burst_count=12,
        burst_cycles=4,
        burst_interval=0.2,
        max_particles=500,
    )
    simulator = ParticleSimulator(settings)
    for _ in range(300):
        simulator.update(1 / 60)

    assert simulator.next_particle_id == 48
    assert simulator.burst_cycle_index == 4


def test_burst_capped_by_limit():
    """测试爆发数量受上限截断。"""
    settings = make_settings(
        emission_type=EmissionType.BURST,
        burst_count=30,
        burst_cycles=2,
        burst_interval=0.1,
        max_particles=40,
    )
    simulator = ParticleSimulator(settings)
    for _ in range(60):
        simulator.update(1 / 30)

    assert simulator.next_particle_id == 40


def test_first_burst_fires_immediately():
    settings = make_settings(
        emission_type=EmissionType.BURST, burst_count=10, burst_cycles=1
    )
    simulator = ParticleSimulator(settings)
    simulator.update(1 / 30)
    assert simulator.particle_count == 10


def test_duration_window():
    """测试持续发射只在时间窗口内生成粒子。"""
    settings = make_settings(
        emission_type=EmissionType.DURATION,
        rate=60,
        duration_start=0.5,
        duration_end=1.0,
    )
    simulator = ParticleSimulator(settings)
    spawn_times = []
    for _ in range(60):
        simulator.update(1 / 30)
        spawn_times.extend(p.spawn_time for p in simulator.particles)

    assert spawn_times
    assert min(spawn_times) >= 0.5
    assert max(spawn_times) <= 1.0


def test_circle_edge_spawns_on_radius():
    """测试圆形边缘发射的粒子到原点距离等于半径。"""
    settings = make_settings(
        shape=EmitterShape.CIRCLE,
        emission_mode=EmissionMode.EDGE,
        shape_radius=37.5,
        position=Vec2(x=100, y=50),
    )
    simulator = ParticleSimulator(settings)
    for _ in range(50):
        particle = simulator.spawn_particle()
        distance = math.hypot(particle.x - 100, particle.y - 50)
        assert distance == pytest.approx(37.5, abs=1e-6)


def test_circle_area_spawns_inside_radius():
    emitter = EmitterConfig(shape=EmitterShape.CIRCLE, shape_radius=10)
    rng = np.random.default_rng(1)
    for _ in range(200):
        dx, dy = sample_spawn_offset(emitter, rng)
        assert math.hypot(dx, dy) <= 10 + 1e-9


def test_line_spawns_along_direction():
    emitter = EmitterConfig(shape=EmitterShape.LINE, line_length=80, angle=0)
    rng = np.random.default_rng(2)
    for _ in range(100):
        dx, dy = sample_spawn_offset(emitter, rng)
        assert -40 <= dx <= 40
        assert dy == pytest.approx(0.0, abs=1e-9)


def test_rectangle_edge_points_on_outline():
    """测试矩形边缘采样点位于轮廓上。"""
    w, h = 120.0, 60.0
    for s in np.linspace(0, 2 * (w + h), 50, endpoint=False):
        x, y = rectangle_edge_point(w, h, s)
        on_vertical = math.isclose(abs(x), w / 2) and abs(y) <= h / 2 + 1e-9
        on_horizontal = math.isclose(abs(y), h / 2) and abs(x) <= w / 2 + 1e-9
        assert on_vertical or on_horizontal


def test_rounded_rect_edge_points_on_outline():
    """测试圆角矩形边缘采样点位于轮廓上。"""
    w, h, r = 100.0, 60.0, 20.0
    perimeter = rounded_rect_perimeter(w, h, r)
    for s in np.linspace(0, perimeter, 200, endpoint=False):
        x, y = rounded_rect_edge_point(w, h, r, s)
        # 到内缩矩形的距离等于圆角半径
        qx = max(abs(x) - (w / 2 - r), 0.0)
        qy = max(abs(y) - (h / 2 - r), 0.0)
        assert math.hypot(qx, qy) == pytest.approx(r, abs=1e-6)


def test_rounded_rect_radius_clamped():
    """测试过大的圆角半径被截断。"""
    assert clamp_corner_radius(100, 40, 50) == 20
    emitter = EmitterConfig(
        shape=EmitterShape.ROUNDED_RECT,
        emission_mode=EmissionMode.EDGE,
        shape_width=100,
        shape_height=40,
        round_radius=500,
    )
    rng = np.random.default_rng(3)
    for _ in range(100):
        x, y = sample_spawn_offset(emitter, rng)
        assert abs(x) <= 50 + 1e-9
        assert abs(y) <= 20 + 1e-9


def test_inverted_speed_range_is_tolerated():
    """测试速度上下限颠倒时仍在区间内取值。"""
    settings = make_settings(speed_min=300, speed_max=100)
    simulator = ParticleSimulator(settings)
    for _ in range(50):
        particle = simulator.spawn_particle()
        assert 100 <= particle.base_speed <= 300


def test_particle_ids_are_monotonic():
    settings = make_settings(rate=200)
    simulator = ParticleSimulator(settings)
    seen = []
    for _ in range(30):
        simulator.update(1 / 30)
        seen.extend(p.id for p in simulator.particles if p.id not in seen)
    assert seen == sorted(seen)
    assert len(seen) == len(set(seen))


def test_dead_particles_are_removed():
    """测试寿命耗尽的粒子被回收。"""
    settings = ParticleSettings(
        emitter=EmitterConfig(emission_type=EmissionType.BURST, burst_count=5),
        life_time_min=0.1,
        life_time_max=0.1,
        seed=1,
    )
    simulator = ParticleSimulator(settings)
    simulator.update(1 / 30)
    assert simulator.particle_count == 5
    for _ in range(10):
        simulator.update(1 / 30)
    assert simulator.particle_count == 0


def test_gravity_and_lifetime_curves_applied():
    """测试重力与尺寸 / 透明度随生命周期变化。"""
    settings = ParticleSettings(
        emitter=EmitterConfig(
            emission_type=EmissionType.BURST,
            burst_count=1,
            speed_min=0,
            speed_max=0,
        ),
        life_time_min=1.0,
        life_time_max=1.0,
        gravity_y=100.0,
        drag=1.0,
        size_over_lifetime=Curve.linear(1.0, 0.0),
        alpha_start=1.0,
        alpha_end=0.0,
        seed=5,
    )
    simulator = ParticleSimulator(settings)
    for _ in range(15):
        simulator.update(0.02)

    particle = simulator.particles[0]
    assert particle.vy > 0
    assert particle.y > settings.emitter.position.y
    assert particle.scale == pytest.approx(particle.alpha)
    assert 0.6 < particle.scale < 0.8


def test_reset_is_idempotent_with_seed():
    """测试相同种子下 reset 后重跑得到相同结果。"""
    settings = make_settings(
        shape=EmitterShape.CIRCLE, angle_spread=180, rate=80
    ).model_copy(update={"noise_strength_over_lifetime": Curve.constant(50.0)})
    simulator = ParticleSimulator(settings, seed=7)

    def run():
        states = []
        for _ in range(40):
            simulator.update(1 / 30)
            states.append([(p.id, p.x, p.y, p.vx, p.vy) for p in simulator.particles])
        return states

    first = run()
    simulator.reset()
    second = run()
    assert first == second


def test_bake_is_reproducible():
    """测试相同种子的两次烘焙完全一致。"""
    settings = make_settings(shape=EmitterShape.RECTANGLE, rate=40)
    first = bake_particle_animation(settings, seed=11)
    second = bake_particle_animation(settings, seed=11)

    assert first.times == second.times
    for a, b in zip(first.frames, second.frames):
        assert a.particles == b.particles


def test_bake_snapshots_relative_to_emitter():
    """测试快照位置相对发射器原点，旋转为角度。"""
    settings = ParticleSettings(
        emitter=EmitterConfig(
            position=Vec2(x=300, y=200),
            emission_type=EmissionType.BURST,
            burst_count=1,
            speed_min=0,
            speed_max=0,
        ),
        gravity_y=0,
        angular_velocity_over_lifetime=Curve.constant(math.pi),
        life_time_min=5,
        life_time_max=5,
        duration=1.0,
        fps=30,
        seed=3,
    )
    baked = bake_particle_animation(settings)

    snapshot = baked.frames[-1].get(0)
    assert snapshot.x == pytest.approx(0.0, abs=1e-9)
    assert snapshot.y == pytest.approx(0.0, abs=1e-9)
    # 生成当帧即开始旋转，30 帧共转过 180°
    assert snapshot.rotation == pytest.approx(180.0)


def test_frame_count_and_times():
    settings = ParticleSettings(duration=0.1, fps=30, seed=1)
    assert get_frame_count(settings) == 3

    baked = bake_particle_animation(ParticleSettings(duration=1.0, fps=24, seed=1))
    assert baked.frame_count == 24
    assert baked.times[0] == pytest.approx(1 / 24)
    assert baked.times[-1] == pytest.approx(1.0)


def test_noise_is_deterministic_and_bounded():
    """测试噪声只依赖输入坐标与时间。"""
    assert 0.0 <= simple_noise(1.5, -2.25) < 1.0
    assert noise_2d(0.3, 0.7, 1.2) == noise_2d(0.3, 0.7, 1.2)
    for i in range(50):
        fx, fy = noise_2d(i * 0.37, i * -0.11, i * 0.05)
        assert math.hypot(fx, fy) < 1.0
