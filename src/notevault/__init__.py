"""Manages a folder of markdown notes through an in-memory cache that stays consistent with the files.

Start with :class:`notevault.store.NoteStore`, or :class:`notevault.aio.AsyncNoteStore` from asyncio code.
Configuration can live in ``~/.notevault.conf.py``; see :meth:`notevault.conf.VaultConf.for_user`.
"""
