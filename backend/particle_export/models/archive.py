"""
归档条目模型定义。
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ArchiveEntry:
    """归档中的一个命名文件。"""

    name: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)
