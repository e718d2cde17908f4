"""Provides :class:`AsyncNoteStore`, for using a vault from asyncio code."""

import asyncio
from typing import Callable, List, Sequence, Set, Union

from notevault.conf import VaultConf
from notevault.store import NoteStore


class AsyncNoteStore:
    """Awaitable counterpart of :class:`notevault.store.NoteStore`.

    Each method runs the matching :class:`NoteStore` method in a worker thread via :func:`asyncio.to_thread`, so
    slow disk access suspends only the awaiting task. Instances wrapping the same :class:`NoteStore` share its
    cache and lock, so synchronous and asynchronous callers can be mixed freely.

    .. attribute:: store
       :type: notevault.store.NoteStore
    """

    def __init__(self, store: Union[NoteStore, VaultConf, str]):
        self.store = store if isinstance(store, NoteStore) else NoteStore(store)

    async def create(self, name: str, content: str) -> None:
        await asyncio.to_thread(self.store.create, name, content)

    async def append(self, name: str, content: str) -> None:
        await asyncio.to_thread(self.store.append, name, content)

    async def read(self, name: str) -> str:
        return await asyncio.to_thread(self.store.read, name)

    async def rename(self, original: str, new: str) -> None:
        await asyncio.to_thread(self.store.rename, original, new)

    async def delete(self, name: str) -> None:
        await asyncio.to_thread(self.store.delete, name)

    async def bulk_delete(self, predicate: Callable[[str], bool]) -> List[str]:
        """The predicate is an ordinary function; it is called from the worker thread."""
        return await asyncio.to_thread(self.store.bulk_delete, predicate)

    async def search(self, term: str) -> List[str]:
        return await asyncio.to_thread(self.store.search, term)

    async def link_notes(self, name: str, label: str, targets: Sequence[str]) -> None:
        await asyncio.to_thread(self.store.link_notes, name, label, targets)

    async def add_tags(self, name: str, tags: Sequence[str]) -> None:
        await asyncio.to_thread(self.store.add_tags, name, tags)

    async def get_tags(self, name: str) -> List[str]:
        return await asyncio.to_thread(self.store.get_tags, name)

    async def apply_table(self, name: str, rows: Sequence[Sequence[str]]) -> None:
        await asyncio.to_thread(self.store.apply_table, name, rows)

    async def names(self) -> List[str]:
        return await asyncio.to_thread(self.store.names)

    async def exists(self, name: str) -> bool:
        return await asyncio.to_thread(self.store.exists, name)

    def invalidate(self, only: Set[str] = None) -> None:
        self.store.invalidate(only)
