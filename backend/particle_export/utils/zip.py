"""
ZIP 归档写入工具。

不依赖现成归档库，按 store（不压缩）方式逐字节生成 zip 容器：
每个条目一个本地文件头 + 原始数据，随后是中央目录和目录结束记录。
所有整数字段均为小端序。
"""

import struct
from typing import List

from particle_export.core.exceptions import ArchiveError
from particle_export.models.archive import ArchiveEntry

LOCAL_FILE_HEADER_SIGNATURE = 0x04034B50
CENTRAL_DIRECTORY_SIGNATURE = 0x02014B50
END_OF_CENTRAL_DIRECTORY_SIGNATURE = 0x06054B50

ZIP_VERSION = 20
METHOD_STORE = 0

# 签名, 解压版本, 标志位, 压缩方法, 修改时间, 修改日期, CRC-32, 压缩后大小, 原始大小, 文件名长度, 扩展字段长度
LOCAL_FILE_HEADER = struct.Struct("<IHHHHHIIIHH")
# 签名, 创建版本, 解压版本, 标志位, 压缩方法, 修改时间, 修改日期, CRC-32, 压缩后大小, 原始大小,
# 文件名长度, 扩展字段长度, 注释长度, 起始磁盘号, 内部属性, 外部属性, 本地文件头偏移
CENTRAL_DIRECTORY_HEADER = struct.Struct("<IHHHHHHIIIHHHHHII")
# 签名, 当前磁盘号, 中央目录起始磁盘号, 本磁盘条目数, 条目总数, 中央目录大小, 中央目录偏移, 注释长度
END_OF_CENTRAL_DIRECTORY = struct.Struct("<IHHHHIIH")

MAX_UINT16 = 0xFFFF
MAX_UINT32 = 0xFFFFFFFF

CRC32_POLYNOMIAL = 0xEDB88320


def _make_crc_table() -> List[int]:
    """生成反射多项式 0xEDB88320 的 256 项查找表。"""
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            if c & 1:
                c = CRC32_POLYNOMIAL ^ (c >> 1)
            else:
                c >>= 1
        table.append(c)
    return table


_CRC_TABLE = _make_crc_table()


def crc32(data: bytes) -> int:
    """
    计算 CRC-32 校验值。

    初值 0xFFFFFFFF，结果异或 0xFFFFFFFF。
    crc32(b"") == 0，crc32(b"123456789") == 0xCBF43926。
    """
    crc = MAX_UINT32
    for byte in data:
        crc = _CRC_TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ MAX_UINT32


class StoreZipWriter:
    """
    store 方式的 zip 写入器。

    条目按添加顺序写出，中央目录顺序与添加顺序一致。
    """

    def __init__(self):
        self._entries: List[ArchiveEntry] = []

    @property
    def entries(self) -> List[ArchiveEntry]:
        return list(self._entries)

    def add_file(self, name: str, data) -> None:
        """
        添加条目。

        Args:
            name: 条目名称（归档内唯一）
            data: 字符串（按 UTF-8 编码）或字节
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        if any(entry.name == name for entry in self._entries):
            raise ArchiveError(f"Duplicate archive entry name: {name}")
        if len(data) > MAX_UINT32:
            raise ArchiveError(f"Archive entry too large for store method: {name}")
        if len(self._entries) >= MAX_UINT16:
            raise ArchiveError("Too many archive entries")
        self._entries.append(ArchiveEntry(name=name, data=bytes(data)))

    def generate(self) -> bytes:
        """生成完整的 zip 字节流。"""
        chunks = []
        central_directory = []
        offset = 0

        for entry in self._entries:
            name_bytes = entry.name.encode("utf-8")
            checksum = crc32(entry.data)
            size = entry.size

            local_header = LOCAL_FILE_HEADER.pack(
                LOCAL_FILE_HEADER_SIGNATURE,
                ZIP_VERSION,
                0,
                METHOD_STORE,
                0,
                0,
                checksum,
                size,
                size,
                len(name_bytes),
                0,
            )
            chunks.append(local_header)
            chunks.append(name_bytes)
            chunks.append(entry.data)

            central_directory.append(
                CENTRAL_DIRECTORY_HEADER.pack(
                    CENTRAL_DIRECTORY_SIGNATURE,
                    ZIP_VERSION,
                    ZIP_VERSION,
                    0,
                    METHOD_STORE,
                    0,
                    0,
                    checksum,
                    size,
                    size,
                    len(name_bytes),
                    0,
                    0,
                    0,
                    0,
                    0,
                    offset,
                )
                + name_bytes
            )

            offset += len(local_header) + len(name_bytes) + size

        if offset > MAX_UINT32:
            raise ArchiveError("Archive too large for 32-bit offsets")

        central_directory_data = b"".join(central_directory)
        end_record = END_OF_CENTRAL_DIRECTORY.pack(
            END_OF_CENTRAL_DIRECTORY_SIGNATURE,
            0,
            0,
            len(self._entries),
            len(self._entries),
            len(central_directory_data),
            offset,
            0,
        )

        return b"".join(chunks) + central_directory_data + end_record
