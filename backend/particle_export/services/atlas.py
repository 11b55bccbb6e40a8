"""
纹理图集服务。

生成单个径向渐变粒子精灵，放入图集左上角，并输出图集描述文本。
"""

from typing import List, Tuple

import numpy as np
from PIL import Image

from particle_export.models.atlas import AtlasRegion

# 径向渐变透明度色标 (位置, 透明度)
GRADIENT_STOPS = ((0.0, 1.0), (0.5, 0.8), (1.0, 0.0))


def create_particle_texture(size: int = 64) -> np.ndarray:
    """
    生成粒子精灵像素。

    白色径向渐变，中心在 (size/2, size/2)，半径 size/2 - 2，
    透明度按色标 1.0 → 0.8 → 0.0 分段线性插值，半径外完全透明。

    Args:
        size: 精灵边长（像素）

    Returns:
        形状为 (size, size, 4) 的 uint8 RGBA 数组
    """
    center = size / 2
    radius = max(size / 2 - 2, 1.0)

    # 像素中心坐标
    coords = np.arange(size, dtype=np.float64) + 0.5
    xx, yy = np.meshgrid(coords, coords)
    distance = np.sqrt((xx - center) ** 2 + (yy - center) ** 2) / radius

    positions = [stop[0] for stop in GRADIENT_STOPS]
    alphas = [stop[1] for stop in GRADIENT_STOPS]
    alpha = np.interp(distance, positions, alphas, right=0.0)

    texture = np.zeros((size, size, 4), dtype=np.uint8)
    texture[..., :3] = 255
    texture[..., 3] = np.round(alpha * 255).astype(np.uint8)
    return texture


def create_particle_atlas(
    sprite_size: int = 64,
    atlas_size: int = 128,
    region_name: str = "particle",
) -> Tuple[Image.Image, AtlasRegion]:
    """
    生成图集位图。

    Args:
        sprite_size: 精灵边长
        atlas_size: 图集边长（不小于精灵边长）
        region_name: 区域名

    Returns:
        (RGBA 图集位图, 精灵所在区域)
    """
    atlas_size = max(atlas_size, sprite_size)

    pixels = np.zeros((atlas_size, atlas_size, 4), dtype=np.uint8)
    pixels[:sprite_size, :sprite_size] = create_particle_texture(sprite_size)

    region = AtlasRegion(name=region_name, x=0, y=0, width=sprite_size, height=sprite_size)
    return Image.fromarray(pixels), region


def generate_atlas_file(
    image_name: str, width: int, height: int, regions: List[AtlasRegion]
) -> str:
    """
    生成图集描述文本。

    Args:
        image_name: 图集位图文件名
        width: 图集宽度
        height: 图集高度
        regions: 区域列表

    Returns:
        图集描述文本（以换行结尾）
    """
    lines = [
        image_name,
        f"size: {width},{height}",
        "format: RGBA8888",
        "filter: Linear,Linear",
        "repeat: none",
    ]
    for region in regions:
        lines.extend(
            [
                region.name,
                "  rotate: false",
                f"  xy: {region.x}, {region.y}",
                f"  size: {region.width}, {region.height}",
                f"  orig: {region.width}, {region.height}",
                "  offset: 0, 0",
                "  index: -1",
            ]
        )
    return "\n".join(lines) + "\n"
