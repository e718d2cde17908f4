import os
import stat
import threading
import pytest
from notevault.errors import IOFailure
from notevault.store import NoteStore

# These use the real filesystem, since pyfakefs isn't meant to be shared across threads.


def _run_threads(count, target):
    threads = [threading.Thread(target=target, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


def test_concurrent_creates_on_distinct_names(tmp_path):
    store = NoteStore(str(tmp_path / 'vault'))

    def work(i):
        for j in range(25):
            store.create(f'n{i}-{j}', f'content {i} {j}')

    _run_threads(8, work)
    expected = {f'n{i}-{j}': f'content {i} {j}' for i in range(8) for j in range(25)}
    assert store.names() == sorted(expected)
    assert sorted(store.search('content')) == sorted(expected)
    for name, content in expected.items():
        assert store.read(name) == content
    store.invalidate()
    for name, content in expected.items():
        assert store.read(name) == content


def test_concurrent_appends_to_cached_note(tmp_path):
    store = NoteStore(str(tmp_path / 'vault'))
    store.create('log', '')

    def work(i):
        for _ in range(50):
            store.append('log', str(i))

    _run_threads(8, work)
    cached = store.read('log')
    assert len(cached) == 400
    assert sorted(cached) == sorted(''.join(str(i) * 50 for i in range(8)))
    assert (tmp_path / 'vault' / 'log.md').read_text() == cached


def test_concurrent_renames_and_reads(tmp_path):
    store = NoteStore(str(tmp_path / 'vault'))
    for i in range(20):
        store.create(f'old{i}', f'text {i}')

    def work(i):
        for j in range(i, 20, 4):
            store.rename(f'old{j}', f'new{j}')
            assert store.read(f'new{j}') == f'text {j}'

    _run_threads(4, work)
    assert store.names() == sorted(f'new{i}' for i in range(20))
    assert sorted(store.search('text')) == sorted(f'new{i}' for i in range(20))


def test_failed_write_keeps_cache(tmp_path, monkeypatch):
    store = NoteStore(str(tmp_path / 'vault'))
    store.create('a', 'old')

    def fail(src, dest):
        raise OSError('disk full')

    monkeypatch.setattr('notevault.store.os.replace', fail)
    with pytest.raises(IOFailure, match="Cannot write note 'a'") as exc_info:
        store.create('a', 'new')
    monkeypatch.undo()
    assert str(exc_info.value.cause) == 'disk full'
    assert store.read('a') == 'old'
    assert (tmp_path / 'vault' / 'a.md').read_text() == 'old'
    assert os.listdir(tmp_path / 'vault') == ['a.md']


def test_failed_new_note_is_not_cached(tmp_path, monkeypatch):
    store = NoteStore(str(tmp_path / 'vault'))

    def fail(src, dest):
        raise OSError('disk full')

    monkeypatch.setattr('notevault.store.os.replace', fail)
    with pytest.raises(IOFailure):
        store.create('a', 'new')
    monkeypatch.undo()
    assert store.search('new') == []
    assert store.names() == []


def test_atomic_write_keeps_permissions(tmp_path):
    store = NoteStore(str(tmp_path / 'vault'))
    store.create('a', 'first')
    path = tmp_path / 'vault' / 'a.md'
    os.chmod(path, 0o644)
    store.create('a', 'second')
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o644
    assert path.read_text() == 'second'
