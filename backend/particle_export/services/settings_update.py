"""
配置编辑服务。

按点分路径逐项修改粒子配置；任何一项校验失败都保留原值并记录警告，不会抛出异常。
"""

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from particle_export.schemas.base import ParticleSettings
from particle_export.utils.numerical import parse_numeric

logger = logging.getLogger(__name__)


def _set_path(data: dict, path: str, value: Any) -> bool:
    """在嵌套字典中按点分路径赋值，路径不存在时返回 False。"""
    keys = path.split(".")
    target = data
    for key in keys[:-1]:
        target = target.get(key) if isinstance(target, dict) else None
        if target is None:
            return False
    if not isinstance(target, dict) or keys[-1] not in target:
        return False

    previous = target[keys[-1]]
    if isinstance(previous, (int, float)) and not isinstance(previous, bool):
        if isinstance(value, str):
            value = parse_numeric(value, previous)
    target[keys[-1]] = value
    return True


def apply_settings_update(
    settings: ParticleSettings, updates: Mapping[str, Any]
) -> ParticleSettings:
    """
    应用配置修改。

    数值字段接受字符串输入，无法解析时保留原值；
    其他字段交给 pydantic 校验，失败时同样保留原值。

    Args:
        settings: 当前配置（不会被修改）
        updates: 点分路径到新值的映射，如 {"emitter.rate": "80"}

    Returns:
        新配置
    """
    current = settings
    for path, value in updates.items():
        data = current.model_dump()
        if not _set_path(data, path, value):
            logger.warning(f"Ignoring unknown setting '{path}'")
            continue
        try:
            current = ParticleSettings.model_validate(data)
        except ValidationError as e:
            logger.warning(
                f"Rejected value {value!r} for '{path}', keeping previous value: "
                f"{e.error_count()} validation error(s)"
            )
    return current
