"""
全局配置模块。

集中管理导出包内的文件命名、动画片段名称、贴图与图集尺寸、预览图绘制参数等。
均可通过 PARTICLE_EXPORT_ 前缀的环境变量覆盖。
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用配置。"""

    model_config = SettingsConfigDict(env_prefix="PARTICLE_EXPORT_")

    # 归档条目文件名
    texture_filename: str = "particles.png"
    preview_filename: str = "preview.png"
    atlas_filename: str = "particles.atlas"
    document_filename: str = "particles_spine.json"

    # 骨骼动画文档
    skeleton_hash: str = "particle_export"
    skeleton_version: str = "4.1.00"
    animation_name: str = "particle_anim"
    attachment_name: str = "particle"

    # 贴图 / 图集（像素）
    sprite_size: int = 64
    atlas_size: int = 128

    # 预览图
    preview_particle_radius: float = 8.0
    preview_opacity: float = 0.3


settings = Settings()
