"""
骨骼动画文档 Schema 定义。

序列化时统一使用 exclude_unset：未显式赋值的可选字段不会写出，
而显式赋值为 None 的字段（如 slot.attachment、关闭附件的关键帧）会写成 null。
"""

import json
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class SkeletonInfo(BaseModel):
    """骨架元数据。"""

    hash: str = Field(..., description="骨架标识")
    version: str = Field(..., description="文档格式版本")
    x: float = 0
    y: float = 0
    width: float = Field(..., description="画面宽度")
    height: float = Field(..., description="画面高度")


class BoneData(BaseModel):
    """骨骼。根骨骼没有 parent。"""

    name: str
    parent: Optional[str] = None


class SlotData(BaseModel):
    """插槽，默认不显示附件。"""

    name: str
    bone: str
    attachment: Optional[str] = None


class RegionAttachment(BaseModel):
    """矩形贴图附件。"""

    type: str = "region"
    name: str
    path: str
    x: float = 0
    y: float = 0
    scaleX: float = 1
    scaleY: float = 1
    rotation: float = 0
    width: int
    height: int


class TranslateKey(BaseModel):
    time: float
    x: float
    y: float


class RotateKey(BaseModel):
    time: float
    angle: float


class ScaleKey(BaseModel):
    time: float
    x: float
    y: float


class AttachmentKey(BaseModel):
    time: float
    name: Optional[str]


class ColorKey(BaseModel):
    time: float
    color: str


class BoneTimeline(BaseModel):
    """单根骨骼的位移 / 旋转 / 缩放关键帧。"""

    translate: Optional[List[TranslateKey]] = None
    rotate: Optional[List[RotateKey]] = None
    scale: Optional[List[ScaleKey]] = None


class SlotTimeline(BaseModel):
    """单个插槽的附件开关（及可选颜色）关键帧。"""

    attachment: Optional[List[AttachmentKey]] = None
    rgba: Optional[List[ColorKey]] = None


class AnimationClip(BaseModel):
    """动画片段。"""

    bones: Dict[str, BoneTimeline] = Field(default_factory=dict)
    slots: Dict[str, SlotTimeline] = Field(default_factory=dict)


class SpineDocument(BaseModel):
    """完整骨骼动画文档。"""

    skeleton: SkeletonInfo
    bones: List[BoneData] = Field(default_factory=list)
    slots: List[SlotData] = Field(default_factory=list)
    skins: Dict[str, Dict[str, Dict[str, RegionAttachment]]] = Field(
        default_factory=dict
    )
    animations: Dict[str, AnimationClip] = Field(default_factory=dict)

    def to_json(self) -> str:
        """序列化为紧凑 JSON 文本。"""
        data = self.model_dump(exclude_unset=True)
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False)
