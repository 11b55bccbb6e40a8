"""
Pydantic Schema 模块。

包含粒子配置模型、导出任务状态、骨骼动画文档模型等。
"""

from particle_export.schemas.base import (
    Color,
    Curve,
    CurveInterpolation,
    CurvePoint,
    EmissionMode,
    EmissionType,
    EmitterConfig,
    EmitterShape,
    ExportSettings,
    ParticleSettings,
    Vec2,
)
from particle_export.schemas.data import ExportStatus
from particle_export.schemas.spine import (
    AnimationClip,
    AttachmentKey,
    BoneData,
    BoneTimeline,
    ColorKey,
    RegionAttachment,
    RotateKey,
    ScaleKey,
    SkeletonInfo,
    SlotData,
    SlotTimeline,
    SpineDocument,
    TranslateKey,
)

__all__ = [
    # 基础配置
    "Vec2",
    "Color",
    "Curve",
    "CurvePoint",
    "CurveInterpolation",
    "EmitterShape",
    "EmissionMode",
    "EmissionType",
    "EmitterConfig",
    "ExportSettings",
    "ParticleSettings",
    # 数据模型
    "ExportStatus",
    # 动画文档
    "SkeletonInfo",
    "BoneData",
    "SlotData",
    "RegionAttachment",
    "TranslateKey",
    "RotateKey",
    "ScaleKey",
    "AttachmentKey",
    "ColorKey",
    "BoneTimeline",
    "SlotTimeline",
    "AnimationClip",
    "SpineDocument",
]
