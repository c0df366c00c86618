import pytest

from .lock import CacheInUseError, FileSystemLock
from .test_utils import normalize_message
from .typed_path import AbsDir, AbsFile, RelFile


@pytest.fixture
def tmp_lock_path(typed_tmp_path: AbsDir) -> AbsFile:
    return typed_tmp_path / RelFile("cache.lock")


@pytest.mark.typed
def test_acquire_creates_lockfile(tmp_lock_path: AbsFile) -> None:
    lock = FileSystemLock.acquire(tmp_lock_path)
    assert tmp_lock_path.exists()
    lock.release()


@pytest.mark.typed
def test_acquire_twice(tmp_lock_path: AbsFile, typed_tmp_path: AbsDir) -> None:
    lock = FileSystemLock.acquire(tmp_lock_path)
    with pytest.raises(CacheInUseError) as e:
        FileSystemLock.acquire(tmp_lock_path)
    assert normalize_message(e, typed_tmp_path) == (
        "'PATH0/cache.lock' is in use by another deployment. Wait for it to finish then try again."
    )
    lock.release()


@pytest.mark.typed
def test_acquire_after_release(tmp_lock_path: AbsFile) -> None:
    lock = FileSystemLock.acquire(tmp_lock_path)
    lock.release()
    lock = FileSystemLock.acquire(tmp_lock_path)
    assert lock


@pytest.mark.typed
def test_destructor_releases_lock(tmp_lock_path: AbsFile) -> None:
    lock = FileSystemLock.acquire(tmp_lock_path)
    file = lock.file
    del lock
    assert file.closed
    assert FileSystemLock.acquire(tmp_lock_path)


@pytest.mark.typed
def test_existing_lockfile_is_reused(tmp_lock_path: AbsFile) -> None:
    tmp_lock_path.path.write_text("left behind")
    lock = FileSystemLock.acquire(tmp_lock_path)
    lock.release()
    assert tmp_lock_path.path.read_text() == "left behind"
