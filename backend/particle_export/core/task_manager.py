"""
任务管理器。

提供导出任务的创建、获取、状态更新与执行。
"""

import logging
import uuid
from typing import Optional

from particle_export.core.exceptions import ExportError
from particle_export.core.storage import task_storage
from particle_export.models.export import ExportTask
from particle_export.schemas.base import ExportSettings, ParticleSettings
from particle_export.schemas.data import ExportStatus
from particle_export.services.export import build_export_package

logger = logging.getLogger(__name__)


def create_export_task(
    settings: ParticleSettings,
    export_settings: Optional[ExportSettings] = None,
) -> str:
    """
    创建导出任务。

    Args:
        settings: 粒子配置
        export_settings: 导出参数

    Returns:
        任务 ID
    """
    export_id = str(uuid.uuid4())

    task = ExportTask(
        export_id=export_id,
        status=ExportStatus.PENDING,
        settings=settings,
        export_settings=export_settings,
    )

    task_storage.add_task(task)
    return export_id


def get_export_task(export_id: str) -> Optional[ExportTask]:
    """
    获取导出任务。

    Args:
        export_id: 任务 ID

    Returns:
        任务对象，如果不存在则返回 None
    """
    return task_storage.get_task(export_id)


def update_task_status(export_id: str, status: ExportStatus) -> bool:
    """
    更新任务状态。

    Args:
        export_id: 任务 ID
        status: 新状态

    Returns:
        是否更新成功
    """
    task = task_storage.get_task(export_id)
    if task is None:
        return False

    task.status = status
    task_storage.update_task(task)
    return True


async def run_export_task(export_id: str) -> Optional[ExportTask]:
    """
    执行导出任务并记录结果。

    只有 PENDING 状态的任务会被执行；其他状态直接返回任务本身。
    导出失败时任务标记为 FAILED，不保存任何部分结果。

    Args:
        export_id: 任务 ID

    Returns:
        任务对象，如果不存在则返回 None
    """
    task = task_storage.get_task(export_id)
    if task is None:
        return None
    if task.status != ExportStatus.PENDING:
        return task

    update_task_status(export_id, ExportStatus.RUNNING)
    logger.info(f"Running export task {export_id[:8]}...")

    try:
        result = await build_export_package(task.settings, task.export_settings)
    except ExportError as e:
        logger.error(f"Export task {export_id[:8]} failed: {e}")
        task.archive = None
        task.error = str(e)
        task.status = ExportStatus.FAILED
        task_storage.update_task(task)
        return task
    except Exception as e:
        logger.exception(f"Export task {export_id[:8]} crashed: {e!r}")
        task.archive = None
        task.error = f"{type(e).__name__}: {e}"
        task.status = ExportStatus.FAILED
        task_storage.update_task(task)
        return task

    task.archive = result.archive
    task.error = None
    task.frame_count = result.frame_count
    task.bone_count = result.bone_count
    task.status = ExportStatus.COMPLETED
    task_storage.update_task(task)
    logger.info(
        f"Export task {export_id[:8]} completed: {len(result.archive)} bytes, "
        f"{task.bone_count} bones"
    )
    return task
