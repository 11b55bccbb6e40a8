"""
任务存储模块。

使用内存保存导出任务及其归档结果，进程退出即丢失。
"""

from typing import Dict, List, Optional

from particle_export.models.export import ExportTask
from particle_export.schemas.data import ExportStatus


class TaskStorage:
    """导出任务存储（内存，以 export_id 为键）。"""

    def __init__(self):
        self._tasks: Dict[str, ExportTask] = {}

    def add_task(self, task: ExportTask) -> None:
        self._tasks[task.export_id] = task

    def get_task(self, export_id: str) -> Optional[ExportTask]:
        return self._tasks.get(export_id)

    def update_task(self, task: ExportTask) -> None:
        """写回任务；未登记的任务忽略。"""
        if task.export_id in self._tasks:
            self._tasks[task.export_id] = task

    def remove_task(self, export_id: str) -> Optional[ExportTask]:
        """删除任务，返回被删除的任务（不存在时返回 None）。"""
        return self._tasks.pop(export_id, None)

    def list_tasks(self, status: Optional[ExportStatus] = None) -> List[ExportTask]:
        """
        列出任务。

        Args:
            status: 只列出该状态的任务，None 表示全部

        Returns:
            任务列表（按登记顺序）
        """
        if status is None:
            return list(self._tasks.values())
        return [task for task in self._tasks.values() if task.status == status]


# 全局任务存储实例
task_storage = TaskStorage()
