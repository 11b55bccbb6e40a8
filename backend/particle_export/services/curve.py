"""
生命周期曲线求值服务。

在归一化时间 [0, 1] 上对稀疏控制点曲线求值，纯函数、无副作用。
"""

from particle_export.schemas.base import Curve, CurveInterpolation
from particle_export.utils.numerical import clamp01


def ease_in_out(local_t: float) -> float:
    """二次缓入缓出。"""
    if local_t < 0.5:
        return 2 * local_t * local_t
    return 1 - (-2 * local_t + 2) ** 2 / 2


def evaluate_curve(curve: Curve, t: float) -> float:
    """
    曲线求值。

    t 先截断到 [0, 1]；控制点按时间稳定排序；
    首个控制点之前返回首值，超出最后一个控制点时返回最后的值，不做外推。

    Args:
        curve: 曲线
        t: 归一化时间

    Returns:
        曲线值
    """
    t = clamp01(t)

    points = sorted(curve.points, key=lambda p: p.time)

    if not points:
        return 0.0
    if len(points) == 1:
        return points[0].value

    # 首个控制点之前保持首值，不做外推
    if t <= points[0].time:
        return points[0].value

    # 找到最后一个起点时间 <= t 的区间
    i = 0
    while i < len(points) - 1 and points[i + 1].time < t:
        i += 1

    if i >= len(points) - 1:
        return points[-1].value

    p1 = points[i]
    p2 = points[i + 1]

    span = p2.time - p1.time
    if span <= 0:
        return p2.value

    local_t = (t - p1.time) / span

    if curve.interpolation == CurveInterpolation.SMOOTH:
        local_t = ease_in_out(local_t)

    return p1.value + (p2.value - p1.value) * local_t
