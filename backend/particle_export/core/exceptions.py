"""
导出异常定义。

异常层次：
- ExportError (基类)
  - ImageEncodingError - 位图编码失败，导出中止，不产生归档
  - ArchiveError - 归档条目非法（重名、超出 store 格式上限）
"""


class ExportError(Exception):
    """导出错误基类。"""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        return self.message


class ImageEncodingError(ExportError):
    """位图编码为 PNG 失败。"""

    def __init__(self, name: str, original_error: Exception = None):
        message = f"Failed to encode bitmap '{name}'"
        if original_error is not None:
            message = f"{message}: {original_error}"
        super().__init__(message, original_error)
        self.name = name


class ArchiveError(ExportError):
    """归档条目非法。"""
