"""
烘焙预览服务。

把全部烘焙帧叠加绘制到一张透明画布上，用于快速检查粒子轨迹。
"""

import math

import numpy as np
from PIL import Image

from particle_export.models.frame import BakedAnimation
from particle_export.schemas.base import ParticleSettings
from particle_export.utils.numerical import clamp01


def _draw_disc(
    canvas: np.ndarray,
    cx: float,
    cy: float,
    radius: float,
    color: np.ndarray,
    opacity: float,
) -> None:
    """在预乘透明度画布上以 source-over 方式绘制实心圆（原地修改）。"""
    height, width = canvas.shape[:2]
    x0 = max(int(math.floor(cx - radius)), 0)
    x1 = min(int(math.ceil(cx + radius)) + 1, width)
    y0 = max(int(math.floor(cy - radius)), 0)
    y1 = min(int(math.ceil(cy + radius)) + 1, height)
    if x0 >= x1 or y0 >= y1:
        return

    ys, xs = np.ogrid[y0:y1, x0:x1]
    inside = (xs + 0.5 - cx) ** 2 + (ys + 0.5 - cy) ** 2 <= radius * radius
    if not inside.any():
        return

    source_alpha = inside * opacity
    region = canvas[y0:y1, x0:x1]
    keep = 1.0 - source_alpha
    region[..., :3] = color * source_alpha[..., None] + region[..., :3] * keep[..., None]
    region[..., 3] = source_alpha + region[..., 3] * keep


def render_baked_preview(
    baked: BakedAnimation,
    settings: ParticleSettings,
    particle_radius: float = 8.0,
    opacity: float = 0.3,
) -> Image.Image:
    """
    渲染烘焙预览图。

    每帧每个粒子画一个半径 particle_radius * scale 的圆，
    圆心在画面中心加上粒子相对发射器的位置，不透明度为 alpha * opacity。

    Args:
        baked: 烘焙结果
        settings: 粒子配置（取画面尺寸）
        particle_radius: 基准半径（像素）
        opacity: 不透明度系数

    Returns:
        frame_size x frame_size 的 RGBA 位图
    """
    size = settings.frame_size
    center = size / 2

    # 预乘透明度的浮点画布，RGB 取值 [0, 1]
    canvas = np.zeros((size, size, 4), dtype=np.float64)

    for frame in baked.frames:
        for particle_id in frame.particle_ids:
            p = frame.particles[particle_id]
            alpha = clamp01(p.alpha * opacity)
            radius = abs(particle_radius * p.scale)
            if alpha <= 0 or radius <= 0:
                continue
            color = np.asarray(p.color, dtype=np.float64) / 255.0
            _draw_disc(canvas, center + p.x, center + p.y, radius, color, alpha)

    # 反预乘
    out_alpha = canvas[..., 3]
    rgb = np.zeros_like(canvas[..., :3])
    visible = out_alpha > 0
    rgb[visible] = canvas[..., :3][visible] / out_alpha[visible][:, None]

    pixels = np.zeros((size, size, 4), dtype=np.uint8)
    pixels[..., :3] = np.round(np.clip(rgb, 0, 1) * 255).astype(np.uint8)
    pixels[..., 3] = np.round(np.clip(out_alpha, 0, 1) * 255).astype(np.uint8)
    return Image.fromarray(pixels)
