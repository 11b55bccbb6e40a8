"""
基础配置 Schema 定义。

包含向量、颜色、曲线、发射器、粒子参数、导出阈值等配置模型。
"""

import math
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

# 允许的导出帧率
ALLOWED_FPS = (24, 30, 60)


class Vec2(BaseModel):
    """二维向量 / 坐标（像素）。"""

    x: float = Field(default=0.0, description="x 坐标")
    y: float = Field(default=0.0, description="y 坐标")


class Color(BaseModel):
    """RGBA 颜色，各通道取值 0-255。"""

    r: int = Field(default=255, ge=0, le=255, description="红色通道")
    g: int = Field(default=255, ge=0, le=255, description="绿色通道")
    b: int = Field(default=255, ge=0, le=255, description="蓝色通道")
    a: int = Field(default=255, ge=0, le=255, description="透明通道")


class CurveInterpolation(str, Enum):
    """曲线插值模式。"""

    LINEAR = "linear"
    SMOOTH = "smooth"


class CurvePoint(BaseModel):
    """曲线控制点。"""

    time: float = Field(..., ge=0, le=1, description="归一化时间 [0, 1]")
    value: float = Field(..., description="该时刻的取值")


class Curve(BaseModel):
    """生命周期曲线（稀疏控制点 + 插值模式）。"""

    points: List[CurvePoint] = Field(
        ..., min_length=1, description="控制点列表，求值前按时间排序"
    )
    interpolation: CurveInterpolation = Field(
        default=CurveInterpolation.LINEAR, description="插值模式"
    )

    @classmethod
    def constant(cls, value: float) -> "Curve":
        """构造常量曲线。"""
        return cls.linear(value, value)

    @classmethod
    def linear(cls, start: float, end: float) -> "Curve":
        """构造从 start 线性变化到 end 的曲线。"""
        return cls(
            points=[
                CurvePoint(time=0.0, value=start),
                CurvePoint(time=1.0, value=end),
            ]
        )


class EmitterShape(str, Enum):
    """发射器形状。"""

    POINT = "point"
    LINE = "line"
    CIRCLE = "circle"
    RECTANGLE = "rectangle"
    ROUNDED_RECT = "roundedRect"


class EmissionMode(str, Enum):
    """发射区域模式：区域内部或轮廓边缘。"""

    AREA = "area"
    EDGE = "edge"


class EmissionType(str, Enum):
    """发射类型。"""

    CONTINUOUS = "continuous"
    BURST = "burst"
    DURATION = "duration"


class EmitterConfig(BaseModel):
    """发射器配置（单次模拟内不可变）。"""

    position: Vec2 = Field(
        default_factory=lambda: Vec2(x=256, y=256), description="发射器原点"
    )
    shape: EmitterShape = Field(default=EmitterShape.POINT, description="发射器形状")
    shape_radius: float = Field(default=20.0, ge=0, description="圆形半径")
    shape_width: float = Field(default=100.0, ge=0, description="矩形宽度")
    shape_height: float = Field(default=100.0, ge=0, description="矩形高度")
    round_radius: float = Field(
        default=20.0, ge=0, description="圆角半径，使用时截断到 min(w, h) / 2"
    )
    line_length: float = Field(default=100.0, ge=0, description="线段长度")
    emission_mode: EmissionMode = Field(
        default=EmissionMode.AREA, description="区域内部 / 轮廓边缘"
    )
    angle: float = Field(default=-90.0, description="发射方向（度）")
    angle_spread: float = Field(default=30.0, description="发射角度扩散（度）")
    speed_min: float = Field(default=100.0, description="初速度下限")
    speed_max: float = Field(default=200.0, description="初速度上限")
    rate: float = Field(default=50.0, gt=0, description="每秒发射数量")
    max_particles: int = Field(default=500, ge=1, description="存活粒子数量上限")

    emission_type: EmissionType = Field(
        default=EmissionType.CONTINUOUS, description="发射类型"
    )
    burst_count: int = Field(default=50, ge=0, description="每次爆发的粒子数")
    burst_cycles: int = Field(default=1, ge=0, description="爆发次数")
    burst_interval: float = Field(default=0.5, ge=0, description="爆发间隔（秒）")
    duration_start: float = Field(default=0.0, ge=0, description="持续发射开始时间（秒）")
    duration_end: float = Field(default=2.0, ge=0, description="持续发射结束时间（秒）")


class ExportSettings(BaseModel):
    """动画导出参数（通道开关 + 关键帧精简阈值）。"""

    export_translate: bool = Field(default=True, description="导出位移通道")
    export_rotate: bool = Field(default=True, description="导出旋转通道")
    export_scale: bool = Field(default=True, description="导出缩放通道")
    export_color: bool = Field(default=False, description="导出颜色通道")

    position_threshold: float = Field(
        default=5.0, ge=0, description="位移关键帧阈值（像素，欧氏距离）"
    )
    rotation_threshold: float = Field(
        default=10.0, ge=0, description="旋转关键帧阈值（度）"
    )
    scale_threshold: float = Field(
        default=0.1, ge=0, description="缩放关键帧阈值（任一轴）"
    )
    color_threshold: float = Field(
        default=30.0, ge=0, description="颜色关键帧阈值（RGBA 通道变化之和，0-255 刻度）"
    )


class ParticleSettings(BaseModel):
    """粒子效果完整配置（单次模拟一份）。"""

    emitter: EmitterConfig = Field(default_factory=EmitterConfig)
    life_time_min: float = Field(default=0.5, gt=0, description="寿命下限（秒）")
    life_time_max: float = Field(default=1.5, gt=0, description="寿命上限（秒）")
    gravity_y: float = Field(default=200.0, description="竖直方向重力加速度")
    drag: float = Field(default=0.98, ge=0, description="每步速度衰减系数")

    size_over_lifetime: Curve = Field(default_factory=lambda: Curve.linear(1.0, 0.2))
    speed_over_lifetime: Curve = Field(default_factory=lambda: Curve.constant(1.0))
    weight_over_lifetime: Curve = Field(default_factory=lambda: Curve.constant(1.0))
    spin_over_lifetime: Curve = Field(default_factory=lambda: Curve.constant(0.0))
    attraction_over_lifetime: Curve = Field(default_factory=lambda: Curve.constant(0.0))
    noise_strength_over_lifetime: Curve = Field(
        default_factory=lambda: Curve.constant(0.0)
    )
    angular_velocity_over_lifetime: Curve = Field(
        default_factory=lambda: Curve.constant(0.0)
    )
    vortex_strength_over_lifetime: Curve = Field(
        default_factory=lambda: Curve.constant(0.0)
    )

    noise_frequency: float = Field(default=0.01, description="噪声空间频率")
    noise_speed: float = Field(default=1.0, description="噪声时间速度")
    vortex_point: Vec2 = Field(default_factory=lambda: Vec2(x=256, y=256))
    attraction_point: Vec2 = Field(default_factory=lambda: Vec2(x=256, y=256))

    non_uniform_scale: bool = Field(default=False, description="是否启用非等比缩放")
    scale_ratio_x: float = Field(default=1.0, description="x 轴缩放比例")
    scale_ratio_y: float = Field(default=1.0, description="y 轴缩放比例")

    color_start: Color = Field(default_factory=lambda: Color(r=255, g=200, b=100))
    color_end: Color = Field(default_factory=lambda: Color(r=255, g=50, b=50))
    alpha_start: float = Field(default=1.0, ge=0, le=1, description="初始透明度")
    alpha_end: float = Field(default=0.0, ge=0, le=1, description="结束透明度")

    duration: float = Field(default=2.0, gt=0, description="导出时长（秒）")
    fps: int = Field(default=30, description="导出帧率，取 24 / 30 / 60")
    frame_size: int = Field(default=512, ge=1, le=4096, description="画面尺寸（像素）")

    seed: Optional[int] = Field(
        default=None, description="随机种子，None 表示不可复现的随机流"
    )

    @field_validator("fps", mode="before")
    @classmethod
    def snap_fps(cls, v):
        """帧率取最接近的允许值。"""
        try:
            fps = float(v)
        except (TypeError, ValueError):
            # 非数值输入交给 int 校验报错
            return v
        if not math.isfinite(fps):
            return v
        return min(ALLOWED_FPS, key=lambda allowed: abs(allowed - fps))
