from __future__ import annotations
from dataclasses import dataclass, replace
import os.path
from typing import Callable


def default_ignore(parentpath: str, filename: str) -> bool:
    return filename.endswith('.icloud')


@dataclass
class VaultConf:
    """Configures a vault of notes, and builds a :class:`notevault.store.NoteStore` for it."""

    root_path: str
    """The folder holding the note files. It will be created (including parents) if it does not exist.

    Notes are flat children of this folder; subfolders are never searched.
    """

    encoding: str = 'utf-8'
    """Text encoding used for reading and writing note files."""

    ignore: Callable[[str, str], bool] = default_ignore
    """Use this to indicate files in the vault that should not be treated as notes.

    The first argument is the path to the vault folder, and the second argument is the filename.

    Ignored files are never loaded by :meth:`notevault.store.NoteStore.search` nor deleted by
    :meth:`notevault.store.NoteStore.bulk_delete`. They can still be read or changed by name.

    The current default behavior is to ignore only ``.icloud`` placeholder files. Names beginning with a period
    (``.``) are still notes, since :meth:`notevault.store.NoteStore.create` accepts them.
    """

    atomic_writes: bool = True
    """If True, :meth:`notevault.store.NoteStore.create` writes to a temporary file in the vault and then
    moves it over the note, so that other programs never see a half-written note.

    Set this to False if the vault lives on a filesystem where the rename is not allowed or not atomic.
    """

    @classmethod
    def for_user(cls) -> VaultConf:
        """Loads the variable ``conf`` from the file ``~/.notevault.conf.py``.

        Raises :exc:`Exception` if the file does not exist or does not define ``conf``.
        """
        path = os.path.expanduser(os.path.join('~', '.notevault.conf.py'))
        if not os.path.exists(path):
            raise Exception(f'You need to create the config file: {path}')
        with open(path, 'r') as file:
            conf_script = file.read()
        context = {}
        exec(conf_script, context)
        if 'conf' not in context or not isinstance(context['conf'], cls):
            raise Exception('You need to assign an instance of VaultConf to the variable `conf` '
                            f'in your config file: {path}')
        return context['conf']

    def standardize(self):
        return replace(
            self,
            root_path=os.path.realpath(os.path.expanduser(self.root_path))
        )

    def instantiate(self):
        from notevault.store import NoteStore
        return NoteStore(self.standardize())
