"""
数据 Schema 定义。

包含导出任务状态等数据模型。
"""

from enum import Enum


class ExportStatus(str, Enum):
    """导出任务状态枚举。"""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
