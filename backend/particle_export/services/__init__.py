"""
业务服务模块。

包含曲线求值、粒子模拟、烘焙、图集、预览、骨骼动画导出、归档组装等服务。
"""

from particle_export.services.atlas import (
    create_particle_atlas,
    create_particle_texture,
    generate_atlas_file,
)
from particle_export.services.baker import bake_particle_animation
from particle_export.services.curve import evaluate_curve
from particle_export.services.export import (
    build_export_package,
    export_particle_package,
)
from particle_export.services.preview import render_baked_preview
from particle_export.services.settings_update import apply_settings_update
from particle_export.services.simulator import ParticleSimulator
from particle_export.services.spine_export import (
    build_particle_keyframes,
    build_spine_document,
    generate_spine_json,
)

__all__ = [
    "evaluate_curve",
    "ParticleSimulator",
    "bake_particle_animation",
    "create_particle_texture",
    "create_particle_atlas",
    "generate_atlas_file",
    "render_baked_preview",
    "build_particle_keyframes",
    "build_spine_document",
    "generate_spine_json",
    "build_export_package",
    "export_particle_package",
    "apply_settings_update",
]
