"""
导出任务模型定义。
"""

from dataclasses import dataclass
from typing import Optional

from particle_export.schemas.base import ExportSettings, ParticleSettings
from particle_export.schemas.data import ExportStatus


@dataclass
class ExportTask:
    """导出任务。"""

    export_id: str  # 任务 ID
    status: ExportStatus  # 任务状态
    settings: ParticleSettings  # 粒子配置
    export_settings: Optional[ExportSettings] = None  # 导出参数，None 使用默认值
    archive: Optional[bytes] = None  # 导出结果（zip 字节流）
    error: Optional[str] = None  # 失败原因
    frame_count: int = 0  # 烘焙帧数
    bone_count: int = 0  # 导出的粒子骨骼数


@dataclass
class ExportResult:
    """一次导出的产物与统计。"""

    archive: bytes  # zip 字节流
    frame_count: int  # 烘焙帧数
    bone_count: int  # 导出的粒子骨骼数（不含根骨骼）
