"""
归档组装服务。

位图在工作线程中编码为 PNG，逐个等待完成后写入归档，
同一时刻最多只有一个编码任务在进行。
"""

import asyncio
import io

from PIL import Image

from particle_export.core.exceptions import ImageEncodingError
from particle_export.utils.zip import StoreZipWriter


def encode_png(image: Image.Image) -> bytes:
    """把位图编码为 PNG 字节流。"""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


async def add_image_file(writer: StoreZipWriter, name: str, image: Image.Image) -> None:
    """
    编码位图并加入归档。

    Args:
        writer: 归档写入器
        name: 条目名
        image: 位图

    Raises:
        ImageEncodingError: 编码失败
    """
    try:
        data = await asyncio.to_thread(encode_png, image)
    except (OSError, ValueError) as e:
        raise ImageEncodingError(name, e) from e
    if not data:
        raise ImageEncodingError(name)
    writer.add_file(name, data)
