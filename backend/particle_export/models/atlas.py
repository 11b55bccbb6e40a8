"""
图集区域模型定义。
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AtlasRegion:
    """图集中的一块矩形区域。"""

    name: str
    x: int
    y: int
    width: int
    height: int

    def fits_in(self, atlas_width: int, atlas_height: int) -> bool:
        """区域是否完全落在图集范围内。"""
        return (
            self.x >= 0
            and self.y >= 0
            and self.x + self.width <= atlas_width
            and self.y + self.height <= atlas_height
        )
