"""
骨骼动画导出服务。

把烘焙得到的逐粒子轨迹转换为精简关键帧的骨骼动画文档：
每个粒子对应一根骨骼和一个插槽，附件开关表示粒子的出现与消失。
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from particle_export.core.config import settings as app_settings
from particle_export.models.frame import BakedAnimation, ParticleSnapshot
from particle_export.schemas.base import ExportSettings, ParticleSettings
from particle_export.schemas.spine import (
    AnimationClip,
    AttachmentKey,
    BoneData,
    BoneTimeline,
    ColorKey,
    RegionAttachment,
    RotateKey,
    ScaleKey,
    SkeletonInfo,
    SlotData,
    SlotTimeline,
    SpineDocument,
    TranslateKey,
)
from particle_export.utils.numerical import clamp01, round_to

logger = logging.getLogger(__name__)

# 可见性判定阈值
VISIBILITY_EPSILON = 0.01
# 角度平滑窗口
SMOOTHING_WINDOW = 3

ROOT_BONE = "root"


def bone_name(particle_id: int) -> str:
    return f"particle_{particle_id}"


def slot_name(particle_id: int) -> str:
    return f"particle_slot_{particle_id}"


def is_particle_visible(snapshot: Optional[ParticleSnapshot]) -> bool:
    """粒子存在且透明度、缩放都大于阈值时视为可见。"""
    return (
        snapshot is not None
        and snapshot.alpha > VISIBILITY_EPSILON
        and snapshot.scale > VISIBILITY_EPSILON
    )


def normalize_angle(angle: float, reference: float) -> float:
    """
    角度展开：加减 360 直到与参考角之差落在 [-180, 180]。

    Args:
        angle: 待展开角度（度）
        reference: 参考角度（度）

    Returns:
        展开后的角度
    """
    while angle - reference > 180:
        angle -= 360
    while angle - reference < -180:
        angle += 360
    return angle


def smooth_angles(angles: Sequence[float], window_size: int = SMOOTHING_WINDOW) -> List[float]:
    """
    滑动窗口中值滤波。

    窗口在序列两端截断；偶数长度窗口取上中位数。

    Args:
        angles: 角度序列
        window_size: 窗口大小

    Returns:
        平滑后的角度序列（与输入等长）
    """
    half = window_size // 2
    result = []
    for i in range(len(angles)):
        window = sorted(angles[max(0, i - half): i + half + 1])
        result.append(window[len(window) // 2])
    return result


def fill_angle_track(track: Sequence[Optional[ParticleSnapshot]]) -> List[float]:
    """
    取出逐帧旋转角。

    缺席的帧沿用上一次已知的角度；首次出现之前的帧用首次出现时的角度回填。
    """
    first_known = next((s.rotation for s in track if s is not None), 0.0)
    angles = []
    last_known = None
    for snapshot in track:
        if snapshot is not None:
            last_known = snapshot.rotation
        angles.append(last_known if last_known is not None else first_known)
    return angles


def color_to_hex(color, alpha: float) -> str:
    """(r, g, b) + alpha 转为 rrggbbaa 十六进制字符串。"""
    a = int(round(clamp01(alpha) * 255))
    r, g, b = color
    return f"{r:02x}{g:02x}{b:02x}{a:02x}"


def _color_delta(previous: str, current: str) -> int:
    """两个 rrggbbaa 颜色的通道变化之和。"""
    return sum(
        abs(int(previous[i: i + 2], 16) - int(current[i: i + 2], 16))
        for i in range(0, 8, 2)
    )


@dataclass
class ParticleKeyframes:
    """单个粒子的关键帧集合。"""

    translate: List[TranslateKey] = field(default_factory=list)
    rotate: List[RotateKey] = field(default_factory=list)
    scale: List[ScaleKey] = field(default_factory=list)
    attachment: List[AttachmentKey] = field(default_factory=list)
    color: List[ColorKey] = field(default_factory=list)
    has_appeared: bool = False

    def bracket(self, first_time: float, last_time: float) -> None:
        """
        在首尾时间点补齐保持关键帧。

        若某通道的首个关键帧晚于首帧，则在首帧插入相同取值的关键帧；
        末尾同理。附件通道在首帧补的是"关闭"状态。
        """
        for keys in (self.translate, self.rotate, self.scale, self.color):
            if not keys:
                continue
            if keys[0].time > first_time:
                keys.insert(0, keys[0].model_copy(update={"time": first_time}))
            if keys[-1].time < last_time:
                keys.append(keys[-1].model_copy(update={"time": last_time}))

        if self.attachment:
            if self.attachment[0].time > first_time:
                self.attachment.insert(0, AttachmentKey(time=first_time, name=None))
            if self.attachment[-1].time < last_time:
                self.attachment.append(
                    AttachmentKey(time=last_time, name=self.attachment[-1].name)
                )


def build_particle_keyframes(
    track: Sequence[Optional[ParticleSnapshot]],
    times: Sequence[float],
    export_settings: Optional[ExportSettings] = None,
    attachment_name: str = "particle",
) -> ParticleKeyframes:
    """
    为单个粒子生成精简关键帧。

    逐帧判定可见性：可见性切换、首帧、末帧强制出关键帧；
    其余帧仅在变化超过阈值时出关键帧。消失时补一个收尾关键帧，
    位置 / 角度沿用最后的值，缩放置 0。

    Args:
        track: 逐帧快照，缺席为 None
        times: 逐帧时间（秒）
        export_settings: 导出参数
        attachment_name: 附件名

    Returns:
        关键帧集合
    """
    opts = export_settings or ExportSettings()
    keys = ParticleKeyframes()
    if not track:
        return keys

    smoothed = smooth_angles(fill_angle_track(track))
    frame_total = len(track)

    prev_pos = None  # 上一个已输出的位移
    prev_angle = None  # 上一个已输出的角度（展开后）
    prev_scale = None
    prev_color = None
    last_pos = (0.0, 0.0)  # 最后一次可见时的取值
    last_angle = 0.0
    last_color = None
    was_visible = False

    for i, (snapshot, frame_time) in enumerate(zip(track, times)):
        time = round_to(frame_time, 3)
        visible = is_particle_visible(snapshot)
        changed = visible != was_visible
        forced = i == 0 or i == frame_total - 1 or changed

        if visible:
            if changed:
                keys.attachment.append(AttachmentKey(time=time, name=attachment_name))
                keys.has_appeared = True

            pos = (snapshot.x, snapshot.y)
            scale = (snapshot.scale_x, snapshot.scale_y)
            if prev_angle is None:
                angle = smoothed[i]
            else:
                angle = normalize_angle(smoothed[i], prev_angle)

            if opts.export_translate and (
                forced
                or prev_pos is None
                or math.hypot(pos[0] - prev_pos[0], pos[1] - prev_pos[1])
                > opts.position_threshold
            ):
                keys.translate.append(
                    TranslateKey(time=time, x=round_to(pos[0], 2), y=round_to(pos[1], 2))
                )
                prev_pos = pos

            if opts.export_rotate and (
                forced
                or prev_angle is None
                or abs(angle - prev_angle) > opts.rotation_threshold
            ):
                keys.rotate.append(RotateKey(time=time, angle=round_to(angle, 2)))
                prev_angle = angle

            if opts.export_scale and (
                forced
                or prev_scale is None
                or abs(scale[0] - prev_scale[0]) > opts.scale_threshold
                or abs(scale[1] - prev_scale[1]) > opts.scale_threshold
            ):
                keys.scale.append(
                    ScaleKey(time=time, x=round_to(scale[0], 3), y=round_to(scale[1], 3))
                )
                prev_scale = scale

            if opts.export_color:
                color = color_to_hex(snapshot.color, snapshot.alpha)
                if (
                    forced
                    or prev_color is None
                    or _color_delta(prev_color, color) > opts.color_threshold
                ):
                    keys.color.append(ColorKey(time=time, color=color))
                    prev_color = color
                last_color = color

            last_pos = pos
            last_angle = angle

        elif changed:
            # 由可见变为不可见：关闭附件并输出收尾关键帧
            keys.attachment.append(AttachmentKey(time=time, name=None))
            if opts.export_translate:
                keys.translate.append(
                    TranslateKey(
                        time=time, x=round_to(last_pos[0], 2), y=round_to(last_pos[1], 2)
                    )
                )
                prev_pos = last_pos
            if opts.export_rotate:
                keys.rotate.append(RotateKey(time=time, angle=round_to(last_angle, 2)))
                prev_angle = last_angle
            if opts.export_scale:
                keys.scale.append(ScaleKey(time=time, x=0, y=0))
                prev_scale = (0.0, 0.0)
            if opts.export_color and last_color is not None:
                keys.color.append(ColorKey(time=time, color=last_color))
                prev_color = last_color

        was_visible = visible

    if keys.has_appeared:
        keys.bracket(round_to(times[0], 3), round_to(times[-1], 3))

    return keys


def build_region_attachment(name: str, size: int) -> RegionAttachment:
    return RegionAttachment(
        type="region",
        name=name,
        path=name,
        x=0,
        y=0,
        scaleX=1,
        scaleY=1,
        rotation=0,
        width=size,
        height=size,
    )


def build_spine_document(
    baked: BakedAnimation,
    settings: ParticleSettings,
    export_settings: Optional[ExportSettings] = None,
) -> SpineDocument:
    """
    构建骨骼动画文档。

    只有出现过（曾经可见）并且有位移关键帧的粒子才会生成骨骼、插槽与皮肤条目；
    关闭位移导出时不要求位移关键帧。

    Args:
        baked: 烘焙结果
        settings: 粒子配置
        export_settings: 导出参数

    Returns:
        骨骼动画文档
    """
    opts = export_settings or ExportSettings()
    attachment_name = app_settings.attachment_name
    times = baked.times

    bones = [BoneData(name=ROOT_BONE)]
    slots = []
    skin = {}
    bone_timelines = {}
    slot_timelines = {}

    for particle_id in baked.particle_ids:
        keys = build_particle_keyframes(
            baked.get_track(particle_id), times, opts, attachment_name
        )
        if not keys.has_appeared:
            continue
        if opts.export_translate and not keys.translate:
            continue

        bone = bone_name(particle_id)
        slot = slot_name(particle_id)

        bones.append(BoneData(name=bone, parent=ROOT_BONE))
        slots.append(SlotData(name=slot, bone=bone, attachment=None))
        skin[slot] = {
            attachment_name: build_region_attachment(
                attachment_name, app_settings.sprite_size
            )
        }

        channels = {}
        if keys.translate:
            channels["translate"] = keys.translate
        if keys.rotate:
            channels["rotate"] = keys.rotate
        if keys.scale:
            channels["scale"] = keys.scale
        bone_timelines[bone] = BoneTimeline(**channels)

        slot_channels = {"attachment": keys.attachment}
        if keys.color:
            slot_channels["rgba"] = keys.color
        slot_timelines[slot] = SlotTimeline(**slot_channels)

    document = SpineDocument(
        skeleton=SkeletonInfo(
            hash=app_settings.skeleton_hash,
            version=app_settings.skeleton_version,
            x=0,
            y=0,
            width=settings.frame_size,
            height=settings.frame_size,
        ),
        bones=bones,
        slots=slots,
        skins={"default": skin},
        animations={
            app_settings.animation_name: AnimationClip(
                bones=bone_timelines, slots=slot_timelines
            )
        },
    )

    logger.info(
        f"Built animation document with {len(bones) - 1} particle bones "
        f"from {len(baked.particle_ids)} baked particles"
    )
    return document


def generate_spine_json(
    baked: BakedAnimation,
    settings: ParticleSettings,
    export_settings: Optional[ExportSettings] = None,
) -> str:
    """构建并序列化骨骼动画文档。"""
    return build_spine_document(baked, settings, export_settings).to_json()
