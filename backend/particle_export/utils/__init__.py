"""
通用工具函数模块。
"""

from particle_export.utils.noise import noise_2d, simple_noise
from particle_export.utils.numerical import (
    clamp01,
    lerp,
    lerp_color,
    ordered_range,
    parse_numeric,
    round_to,
)
from particle_export.utils.zip import StoreZipWriter, crc32

__all__ = [
    "clamp01",
    "lerp",
    "lerp_color",
    "ordered_range",
    "parse_numeric",
    "round_to",
    "simple_noise",
    "noise_2d",
    "crc32",
    "StoreZipWriter",
]
