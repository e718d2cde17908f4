"""Provides the :class:`NoteStore` class, the main entry point for working with a vault of notes."""

from __future__ import annotations
import contextlib
import logging
import os
import os.path
import shutil
from tempfile import mkstemp
import threading
from typing import Callable, Dict, Iterable, List, Sequence, Set, Union

from notevault.conf import VaultConf
from notevault.errors import AlreadyExistsError, InvalidArgumentError, IOFailure, NotFoundError
from notevault.markdown import extract_tags, format_links, format_table, format_tags

logger = logging.getLogger(__name__)

NOTE_SUFFIX = '.md'


def _check_name(name: str, what: str = 'Note name') -> None:
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError(f'{what} cannot be empty or whitespace: {name!r}',
                                   name if isinstance(name, str) else None)


def _check_text(text: str, what: str, name: str) -> None:
    if text is None:
        raise InvalidArgumentError(f'{what} cannot be None.', name)
    if not isinstance(text, str):
        raise InvalidArgumentError(f'{what} must be a string, not {type(text).__name__}.', name)


def _check_names(names: Iterable[str], what: str, name: str) -> List[str]:
    if names is None or isinstance(names, str):
        raise InvalidArgumentError(f'{what} must be a list of strings.', name)
    names = list(names)
    for item in names:
        _check_name(item, what)
    return names


def _check_grid(rows: Sequence[Sequence[str]], name: str) -> List[List[str]]:
    if rows is None or isinstance(rows, str):
        raise InvalidArgumentError('Table must be a list of rows.', name)
    grid = []
    for row in rows:
        if row is None or isinstance(row, str):
            raise InvalidArgumentError('Each table row must be a list of cells.', name)
        grid.append(list(row))
    if not grid or not grid[0]:
        raise InvalidArgumentError('Table needs at least one row and one column.', name)
    width = len(grid[0])
    for row in grid:
        if len(row) != width:
            raise InvalidArgumentError(f'Every table row must have {width} cells: {row!r}', name)
        if any(cell is None for cell in row):
            raise InvalidArgumentError(f'Table cells cannot be None: {row!r}', name)
    return grid


class NoteStore:
    """Reads and changes the notes in a vault, keeping an in-memory cache of their contents.

    Each note is a file named ``{name}.md`` directly inside :attr:`conf.root_path <notevault.conf.VaultConf.root_path>`.
    The cache maps note names to their full text. It is filled when a note is read or written, and in full by the
    first :meth:`search` made while it is empty. Appending to a note updates its cache entry only if it already has
    one.

    Every method may be called from any number of threads. A single lock guards the cache, and each file operation
    happens inside the same critical section as the cache update that goes with it, so the cache always matches
    what this instance last did on disk. If the file operation fails, the cache is left alone.

    If other programs change the files, the cache can go stale; call :meth:`invalidate` after doing so.

    Failures raise subclasses of :exc:`notevault.errors.Error`.

    Here's an example that tags every note mentioning a project:

    .. code-block:: python

       from notevault.store import NoteStore
       with NoteStore('~/notes') as store:
           for name in store.search('project x'):
               store.add_tags(name, ['project_x'])

    .. attribute:: conf
       :type: notevault.conf.VaultConf
    """

    def __init__(self, conf: Union[VaultConf, str]):
        if isinstance(conf, str):
            conf = VaultConf(conf).standardize()
        self.conf = conf
        self._cache: Dict[str, str] = {}
        self._lock = threading.Lock()
        try:
            os.makedirs(conf.root_path, exist_ok=True)
        except OSError as e:
            raise IOFailure(f'Cannot create vault directory: {conf.root_path}', cause=e) from e

    def note_path(self, name: str) -> str:
        """Returns the path of the file for the given note, whether or not it exists."""
        return os.path.join(self.conf.root_path, name + NOTE_SUFFIX)

    def exists(self, name: str) -> bool:
        _check_name(name)
        return os.path.isfile(self.note_path(name))

    def names(self) -> List[str]:
        """Returns the sorted names of all notes in the vault, skipping files rejected by
        :attr:`notevault.conf.VaultConf.ignore`."""
        root = self.conf.root_path
        result = []
        try:
            with os.scandir(root) as entries:
                for entry in entries:
                    if not entry.name.endswith(NOTE_SUFFIX) or self.conf.ignore(root, entry.name):
                        continue
                    name = entry.name[:-len(NOTE_SUFFIX)]
                    if name.strip() and entry.is_file():
                        result.append(name)
        except OSError as e:
            raise IOFailure(f'Cannot list vault directory: {root}', cause=e) from e
        result.sort()
        return result

    def create(self, name: str, content: str) -> None:
        """Writes the note, replacing it entirely if it already exists."""
        _check_name(name)
        _check_text(content, 'Note content', name)
        with self._lock:
            self._write_file(name, content)
            self._cache[name] = content
        logger.info('Wrote note %r (%d characters)', name, len(content))

    def append(self, name: str, content: str) -> None:
        """Adds content to the end of the note, creating the file if necessary.

        Nothing is inserted between the existing text and the new content.
        """
        _check_name(name)
        _check_text(content, 'Content to append', name)
        with self._lock:
            self._append_file(name, content)
            if name in self._cache:
                self._cache[name] += content
        logger.debug('Appended %d characters to note %r', len(content), name)

    def read(self, name: str) -> str:
        """Returns the full text of the note, from the cache when possible.

        Raises :exc:`notevault.errors.NotFoundError` if the note is neither cached nor on disk.
        """
        _check_name(name)
        with self._lock:
            content = self._cache.get(name)
            if content is not None:
                logger.debug('Cache hit for note %r', name)
                return content
            logger.debug('Cache miss for note %r', name)
            content = self._read_file(name)
            self._cache[name] = content
            return content

    def rename(self, original: str, new: str) -> None:
        """Renames a note. Links to it in other notes are not updated.

        Raises :exc:`notevault.errors.NotFoundError` if ``original`` does not exist, or
        :exc:`notevault.errors.AlreadyExistsError` if ``new`` does.
        """
        _check_name(original, 'Original note name')
        _check_name(new, 'New note name')
        original_path = self.note_path(original)
        new_path = self.note_path(new)
        with self._lock:
            if not os.path.isfile(original_path):
                raise NotFoundError(f'The note {original!r} does not exist.', original)
            if os.path.exists(new_path):
                raise AlreadyExistsError(f'A note with the name {new!r} already exists.', new)
            try:
                os.rename(original_path, new_path)
            except FileNotFoundError as e:
                raise NotFoundError(f'The note {original!r} does not exist.', original) from e
            except OSError as e:
                raise IOFailure(f'Cannot rename note {original!r} to {new!r}', original, e) from e
            content = self._cache.pop(original, None)
            if content is None:
                self._cache.pop(new, None)
            else:
                self._cache[new] = content
        logger.info('Renamed note %r to %r', original, new)

    def delete(self, name: str) -> None:
        """Deletes the note's file and forgets its cached content."""
        _check_name(name)
        with self._lock:
            self._delete_file(name)
        logger.info('Deleted note %r', name)

    def bulk_delete(self, predicate: Callable[[str], bool]) -> List[str]:
        """Deletes every note whose name the predicate returns True for, and returns their names.

        The predicate is called without holding the store's lock, so it may use this store itself.

        The notes are deleted one at a time. If one deletion fails, its error is raised immediately and the
        remaining notes are left alone; notes deleted before the failure stay deleted.
        """
        if not callable(predicate):
            raise InvalidArgumentError('Predicate must be callable.')
        deleted = []
        for name in self.names():
            if not predicate(name):
                continue
            with self._lock:
                self._delete_file(name)
            deleted.append(name)
        logger.info('Bulk delete removed %d notes', len(deleted))
        return deleted

    def search(self, term: str) -> List[str]:
        """Returns the names of notes whose content contains the term, ignoring case.

        If nothing is cached yet, every note in the vault is loaded into the cache first. Otherwise only cached notes
        are searched. Results are in the order the notes entered the cache, not alphabetical.
        """
        if not isinstance(term, str) or not term:
            raise InvalidArgumentError('Search term cannot be empty.')
        needle = term.lower()
        with self._lock:
            if not self._cache:
                self._warm_up()
            return [name for name, content in self._cache.items() if needle in content.lower()]

    def link_notes(self, name: str, label: str, targets: Sequence[str]) -> None:
        """Appends a sub-list titled ``label`` with a ``[[wiki link]]`` to each target note.

        The targets don't need to exist.
        """
        _check_name(name)
        _check_name(label, 'List label')
        targets = _check_names(targets, 'Link target', name)
        self.append(name, format_links(label, targets))

    def add_tags(self, name: str, tags: Sequence[str]) -> None:
        """Appends a "Tags" list with a ``#tag`` bullet for each tag. Tags should be given without the ``#``."""
        _check_name(name)
        tags = _check_names(tags, 'Tag', name)
        self.append(name, format_tags(tags))

    def get_tags(self, name: str) -> List[str]:
        """Returns every hashtag in the note (see :func:`notevault.markdown.extract_tags`)."""
        return extract_tags(self.read(name))

    def apply_table(self, name: str, rows: Sequence[Sequence[str]]) -> None:
        """Appends a pipe table. The first row is the header; every row must have the same number of cells."""
        _check_name(name)
        grid = _check_grid(rows, name)
        self.append(name, format_table(grid))

    def invalidate(self, only: Set[str] = None) -> None:
        """Forgets cached content, so that it will be read from disk next time.

        If ``only`` is non-empty, just those notes are forgotten. You need this only if notes were changed
        without going through this instance.
        """
        with self._lock:
            if only:
                for name in only:
                    self._cache.pop(name, None)
            else:
                self._cache.clear()

    def close(self) -> None:
        """Drops the cache. The instance remains usable."""
        self.invalidate()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # The methods below expect the caller to hold self._lock.

    def _open(self, path: str, mode: str):
        return open(path, mode, encoding=self.conf.encoding, newline='')

    def _read_file(self, name: str) -> str:
        try:
            with self._open(self.note_path(name), 'r') as file:
                return file.read()
        except FileNotFoundError as e:
            raise NotFoundError(f'The note {name!r} does not exist.', name) from e
        except (OSError, UnicodeError) as e:
            raise IOFailure(f'Cannot read note {name!r}', name, e) from e

    def _write_file(self, name: str, content: str) -> None:
        path = self.note_path(name)
        try:
            if self.conf.atomic_writes:
                self._replace_file(path, content)
            else:
                with self._open(path, 'w') as file:
                    file.write(content)
        except (OSError, UnicodeError) as e:
            raise IOFailure(f'Cannot write note {name!r}', name, e) from e

    def _replace_file(self, path: str, content: str) -> None:
        parent, basename = os.path.split(path)
        fd, tmp = mkstemp(prefix=f'.{basename}.', suffix='.tmp', dir=parent)
        try:
            with os.fdopen(fd, 'w', encoding=self.conf.encoding, newline='') as file:
                file.write(content)
            if os.path.isfile(path):
                shutil.copymode(path, tmp)
            os.replace(tmp, path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.remove(tmp)
            raise

    def _append_file(self, name: str, content: str) -> None:
        try:
            with self._open(self.note_path(name), 'a') as file:
                file.write(content)
        except (OSError, UnicodeError) as e:
            raise IOFailure(f'Cannot append to note {name!r}', name, e) from e

    def _delete_file(self, name: str) -> None:
        path = self.note_path(name)
        if not os.path.isfile(path):
            raise NotFoundError(f'The note {name!r} does not exist.', name)
        try:
            os.remove(path)
        except FileNotFoundError as e:
            raise NotFoundError(f'The note {name!r} does not exist.', name) from e
        except OSError as e:
            raise IOFailure(f'Cannot delete note {name!r}', name, e) from e
        self._cache.pop(name, None)

    def _warm_up(self) -> None:
        names = self.names()
        logger.debug('Loading %d notes into the cache', len(names))
        for name in names:
            try:
                self._cache[name] = self._read_file(name)
            except NotFoundError:
                # deleted by another program since names() listed it
                logger.debug('Note %r vanished during warm-up', name)
