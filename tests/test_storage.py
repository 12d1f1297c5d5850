"""
LocalFileStore tests against a temporary directory.
"""

import errno
import os

import pytest

from hypr_config_manager.errors import (
    ErrorCode,
    FileStoreError,
    NotFoundError,
    PermissionDeniedError,
)
from hypr_config_manager.storage import LocalFileStore, translate_os_error


@pytest.fixture
def local_store():
    return LocalFileStore()


@pytest.mark.asyncio
async def test_write_creates_parent_directories(local_store, tmp_path):
    path = tmp_path / ".config" / "hypr" / "hyprland.conf"

    await local_store.write(path, "bind = SUPER, Q, exec, kitty\n")

    assert path.read_text(encoding="utf-8") == "bind = SUPER, Q, exec, kitty\n"
    assert await local_store.read(path) == "bind = SUPER, Q, exec, kitty\n"


@pytest.mark.asyncio
async def test_size_counts_bytes(local_store, tmp_path):
    path = tmp_path / "hyprland.conf"
    await local_store.write(path, "é")

    assert await local_store.size(path) == 2


@pytest.mark.asyncio
async def test_read_missing(local_store, tmp_path):
    with pytest.raises(NotFoundError) as exc_info:
        await local_store.read(tmp_path / "missing.conf")
    assert exc_info.value.code == ErrorCode.FILE_NOT_FOUND


@pytest.mark.asyncio
async def test_list(local_store, tmp_path):
    await local_store.write(tmp_path / "b.conf", "b")
    await local_store.write(tmp_path / "a.conf", "a")
    (tmp_path / "subdir").mkdir()

    assert await local_store.list(tmp_path) == ["a.conf", "b.conf"]
    assert await local_store.list(tmp_path / "absent") == []


@pytest.mark.asyncio
async def test_delete(local_store, tmp_path):
    path = tmp_path / "hyprland.conf"
    await local_store.write(path, "x")

    await local_store.delete(path)

    assert not path.exists()
    with pytest.raises(NotFoundError):
        await local_store.delete(path)


@pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores file modes")
@pytest.mark.asyncio
async def test_read_permission_denied(local_store, tmp_path):
    path = tmp_path / "hyprland.conf"
    path.write_text("secret")
    path.chmod(0)
    try:
        with pytest.raises(PermissionDeniedError):
            await local_store.read(path)
    finally:
        path.chmod(0o644)


@pytest.mark.parametrize("error,expected", [
    (FileNotFoundError(errno.ENOENT, "No such file"), NotFoundError),
    (PermissionError(errno.EACCES, "Permission denied"), PermissionDeniedError),
    (OSError(errno.EPERM, "Operation not permitted"), PermissionDeniedError),
    (OSError(errno.ENOSPC, "No space left on device"), FileStoreError),
])
def test_translate_os_error(tmp_path, error, expected):
    translated = translate_os_error(error, tmp_path / "hyprland.conf", "write")
    assert type(translated) is expected


def test_translate_other_error_keeps_reason(tmp_path):
    translated = translate_os_error(OSError(errno.ENOSPC, "No space left on device"), tmp_path, "write")

    assert translated.code == ErrorCode.FILE_WRITE_ERROR
    assert "No space left on device" in translated.message
