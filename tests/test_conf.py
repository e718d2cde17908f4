import os.path
import pytest
from notevault.conf import VaultConf, default_ignore
from notevault.store import NoteStore


def test_default_ignore():
    assert default_ignore('/notes', 'note.md.icloud')

    assert not default_ignore('/notes', 'note.md')
    assert not default_ignore('/notes', '.plan.md')
    assert not default_ignore('/notes/.git', 'note.md')


def test_for_user_no_file(fs):
    with pytest.raises(Exception, match=r'You need to create the config file: .*\.notevault\.conf\.py'):
        VaultConf.for_user()


def test_for_user(fs):
    confpy = """from notevault.conf import *
conf = VaultConf(root_path='/notes', encoding='latin-1')"""
    fs.create_file(os.path.expanduser('~/.notevault.conf.py'), contents=confpy)
    assert VaultConf.for_user() == VaultConf(root_path='/notes', encoding='latin-1')


def test_for_user_without_conf(fs):
    fs.create_file(os.path.expanduser('~/.notevault.conf.py'), contents="conf = '/notes'")
    with pytest.raises(Exception, match=r'assign an instance of VaultConf to the variable `conf`'):
        VaultConf.for_user()


def test_standardize(fs):
    fs.create_dir('/real/notes')
    fs.create_symlink('/link', '/real')
    assert VaultConf(root_path='/link/notes').standardize().root_path == '/real/notes'
    assert (VaultConf(root_path='~/notes').standardize().root_path
            == os.path.realpath(os.path.expanduser('~/notes')))


def test_instantiate(fs):
    store = VaultConf(root_path='/notes/nested/vault', atomic_writes=False).instantiate()
    assert isinstance(store, NoteStore)
    assert os.path.isdir('/notes/nested/vault')
    assert store.conf.atomic_writes is False
