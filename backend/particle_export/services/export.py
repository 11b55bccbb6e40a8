"""
导出流水线服务。

烘焙 → 骨骼动画文档 → 图集位图与描述 → 预览图 → 归档。
"""

import logging
from typing import Optional

from particle_export.core.config import settings as app_settings
from particle_export.models.export import ExportResult
from particle_export.schemas.base import ExportSettings, ParticleSettings
from particle_export.services.archive import add_image_file
from particle_export.services.atlas import create_particle_atlas, generate_atlas_file
from particle_export.services.baker import bake_particle_animation
from particle_export.services.preview import render_baked_preview
from particle_export.services.spine_export import build_spine_document
from particle_export.utils.zip import StoreZipWriter

logger = logging.getLogger(__name__)


async def build_export_package(
    settings: ParticleSettings,
    export_settings: Optional[ExportSettings] = None,
    seed: Optional[int] = None,
) -> ExportResult:
    """
    执行完整导出流水线。

    归档条目顺序：贴图、预览图、图集描述、动画文档。
    任一位图编码失败时抛出 ImageEncodingError，不产生任何归档字节。

    Args:
        settings: 粒子配置
        export_settings: 导出参数
        seed: 随机种子，None 时使用配置中的种子

    Returns:
        导出结果
    """
    baked = bake_particle_animation(settings, seed=seed)
    document = build_spine_document(baked, settings, export_settings)

    atlas_image, region = create_particle_atlas(
        sprite_size=app_settings.sprite_size,
        atlas_size=app_settings.atlas_size,
        region_name=app_settings.attachment_name,
    )
    atlas_text = generate_atlas_file(
        app_settings.texture_filename,
        atlas_image.width,
        atlas_image.height,
        [region],
    )

    preview_image = render_baked_preview(
        baked,
        settings,
        particle_radius=app_settings.preview_particle_radius,
        opacity=app_settings.preview_opacity,
    )

    writer = StoreZipWriter()
    await add_image_file(writer, app_settings.texture_filename, atlas_image)
    await add_image_file(writer, app_settings.preview_filename, preview_image)
    writer.add_file(app_settings.atlas_filename, atlas_text)
    writer.add_file(app_settings.document_filename, document.to_json())

    archive = writer.generate()
    bone_count = len(document.bones) - 1
    logger.info(
        f"Export package written: {len(archive)} bytes, "
        f"{len(writer.entries)} entries, {bone_count} bones"
    )
    return ExportResult(
        archive=archive, frame_count=baked.frame_count, bone_count=bone_count
    )


async def export_particle_package(
    settings: ParticleSettings,
    export_settings: Optional[ExportSettings] = None,
    seed: Optional[int] = None,
) -> bytes:
    """执行导出流水线，只返回归档字节流。"""
    result = await build_export_package(settings, export_settings, seed=seed)
    return result.archive
