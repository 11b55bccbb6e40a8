"""
内部数据模型模块。

包含粒子、烘焙帧、图集区域、归档条目、导出任务等内部数据结构。
"""

from particle_export.models.archive import ArchiveEntry
from particle_export.models.atlas import AtlasRegion
from particle_export.models.export import ExportResult, ExportTask
from particle_export.models.frame import BakedAnimation, BakedFrame, ParticleSnapshot
from particle_export.models.particle import Particle

__all__ = [
    "Particle",
    "ParticleSnapshot",
    "BakedFrame",
    "BakedAnimation",
    "AtlasRegion",
    "ArchiveEntry",
    "ExportTask",
    "ExportResult",
]
