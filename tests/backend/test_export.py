"""
导出流水线与导出任务测试。
"""

import io
import json
import zipfile

import pytest

from particle_export.core.exceptions import ImageEncodingError
from particle_export.core import task_manager
from particle_export.core.storage import task_storage
from particle_export.core.task_manager import (
    create_export_task,
    get_export_task,
    run_export_task,
    update_task_status,
)
from particle_export.schemas.base import EmitterConfig, ExportSettings, ParticleSettings
from particle_export.schemas.data import ExportStatus
from particle_export.services import archive as archive_service
from particle_export.services.export import (
    build_export_package,
    export_particle_package,
)


@pytest.fixture
def settings():
    return ParticleSettings(
        emitter=EmitterConfig(rate=30, max_particles=100),
        duration=0.5,
        fps=24,
        frame_size=128,
        seed=123,
    )


@pytest.fixture
def broken_encoder(monkeypatch):
    """让位图编码失败。"""

    def fail(image):
        raise OSError("encoder unavailable")

    monkeypatch.setattr(archive_service, "encode_png", fail)


@pytest.mark.anyio
async def test_export_package_entries(settings):
    """测试归档包含 4 个条目且顺序固定。"""
    archive = await export_particle_package(settings)

    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        assert zf.namelist() == [
            "particles.png",
            "preview.png",
            "particles.atlas",
            "particles_spine.json",
        ]
        assert zf.testzip() is None
        assert zf.read("particles.png").startswith(b"\x89PNG\r\n\x1a\n")
        assert zf.read("preview.png").startswith(b"\x89PNG\r\n\x1a\n")
        assert zf.read("particles.atlas").decode("utf-8").startswith(
            "particles.png\nsize: 128,128\n"
        )
        document = json.loads(zf.read("particles_spine.json"))

    assert document["skeleton"]["width"] == 128
    assert document["bones"][0] == {"name": "root"}
    assert "particle_anim" in document["animations"]


@pytest.mark.anyio
async def test_export_is_reproducible(settings):
    """测试相同种子的两次导出字节一致。"""
    first = await export_particle_package(settings)
    second = await export_particle_package(settings)
    assert first == second


@pytest.mark.anyio
async def test_export_result_counts(settings):
    result = await build_export_package(settings, ExportSettings(export_color=True))

    assert result.frame_count == 12
    assert result.bone_count > 0

    with zipfile.ZipFile(io.BytesIO(result.archive)) as zf:
        document = json.loads(zf.read("particles_spine.json"))
    assert len(document["bones"]) == result.bone_count + 1
    slots = document["animations"]["particle_anim"]["slots"]
    assert all("rgba" in timeline for timeline in slots.values())


@pytest.mark.anyio
async def test_encoding_failure_aborts_export(settings, broken_encoder):
    """测试位图编码失败时中止导出。"""
    with pytest.raises(ImageEncodingError) as exc_info:
        await export_particle_package(settings)

    assert "particles.png" in str(exc_info.value)
    assert isinstance(exc_info.value.original_error, OSError)


def test_create_and_get_task(settings):
    """测试创建导出任务。"""
    export_id = create_export_task(settings)
    task = get_export_task(export_id)

    assert task is not None
    assert task.status == ExportStatus.PENDING
    assert task.archive is None
    assert get_export_task("missing") is None
    assert task in task_storage.list_tasks()
    assert task in task_storage.list_tasks(ExportStatus.PENDING)
    assert task not in task_storage.list_tasks(ExportStatus.COMPLETED)

    assert update_task_status(export_id, ExportStatus.FAILED)
    assert get_export_task(export_id).status == ExportStatus.FAILED
    assert not update_task_status("missing", ExportStatus.RUNNING)
    assert task_storage.remove_task(export_id) is task
    assert task_storage.remove_task(export_id) is None


@pytest.mark.anyio
async def test_run_export_task_completes(settings):
    """测试执行导出任务并记录结果。"""
    export_id = create_export_task(settings)

    task = await run_export_task(export_id)

    assert task.status == ExportStatus.COMPLETED
    assert task.error is None
    assert task.archive[:4] == b"PK\x03\x04"
    assert task.frame_count == 12
    assert task.bone_count > 0

    # 已完成的任务不会被重复执行
    archive = task.archive
    again = await run_export_task(export_id)
    assert again.status == ExportStatus.COMPLETED
    assert again.archive is archive
    task_storage.remove_task(export_id)


@pytest.mark.anyio
async def test_run_export_task_failure(settings, broken_encoder):
    """测试导出失败时任务标记为 FAILED。"""
    export_id = create_export_task(settings)

    task = await run_export_task(export_id)

    assert task.status == ExportStatus.FAILED
    assert task.archive is None
    assert "encoder unavailable" in task.error
    task_storage.remove_task(export_id)


@pytest.mark.anyio
async def test_run_export_task_unexpected_error(settings, monkeypatch):
    """测试非导出异常同样把任务标记为 FAILED。"""

    async def exhausted(*args, **kwargs):
        raise MemoryError("cannot allocate preview canvas")

    monkeypatch.setattr(task_manager, "build_export_package", exhausted)
    export_id = create_export_task(settings)

    task = await run_export_task(export_id)

    assert task.status == ExportStatus.FAILED
    assert task.archive is None
    assert task.error.startswith("MemoryError")
    assert get_export_task(export_id).status == ExportStatus.FAILED
    task_storage.remove_task(export_id)


@pytest.mark.anyio
async def test_run_missing_task():
    assert await run_export_task("missing") is None
