"""
曲线求值测试。
"""

import pytest

from particle_export.schemas.base import Curve, CurveInterpolation, CurvePoint
from particle_export.services.curve import evaluate_curve


def make_curve(points, interpolation=CurveInterpolation.LINEAR):
    return Curve(
        points=[CurvePoint(time=t, value=v) for t, v in points],
        interpolation=interpolation,
    )


def test_single_point_is_constant():
    """测试单点曲线为常量。"""
    curve = make_curve([(0.3, 7.0)])
    for t in (0.0, 0.3, 0.8, 1.0):
        assert evaluate_curve(curve, t) == 7.0


def test_endpoints_ignore_input_order():
    """测试端点取值与控制点输入顺序无关。"""
    curve = make_curve([(1.0, 4.0), (0.0, -2.0), (0.5, 10.0)])
    assert evaluate_curve(curve, 0.0) == -2.0
    assert evaluate_curve(curve, 1.0) == 4.0


def test_linear_midpoint_is_mean():
    """测试线性模式中点取两端均值。"""
    curve = make_curve([(0.2, 1.0), (0.6, 3.0)])
    assert evaluate_curve(curve, 0.4) == pytest.approx(2.0)


def test_time_is_clamped():
    """测试时间截断到 [0, 1]。"""
    curve = make_curve([(0.0, 1.0), (1.0, 0.2)])
    assert evaluate_curve(curve, -5.0) == 1.0
    assert evaluate_curve(curve, 3.0) == pytest.approx(0.2)


def test_no_extrapolation_beyond_last_point():
    """测试超出最后控制点时返回最后的值。"""
    curve = make_curve([(0.0, 0.0), (0.5, 8.0)])
    assert evaluate_curve(curve, 0.9) == 8.0


def test_before_first_point_holds_first_value():
    """测试首个控制点之前保持首值。"""
    curve = make_curve([(0.4, 2.0), (0.8, 6.0)])
    assert evaluate_curve(curve, 0.0) == 2.0
    assert evaluate_curve(curve, 0.2) == 2.0


def test_smooth_interpolation():
    """测试平滑模式的缓入缓出。"""
    curve = make_curve([(0.0, 0.0), (1.0, 1.0)], CurveInterpolation.SMOOTH)
    assert evaluate_curve(curve, 0.25) == pytest.approx(0.125)
    assert evaluate_curve(curve, 0.5) == pytest.approx(0.5)
    assert evaluate_curve(curve, 0.75) == pytest.approx(0.875)


def test_empty_curve_rejected():
    """测试空控制点列表无法通过校验。"""
    with pytest.raises(ValueError):
        Curve(points=[])
