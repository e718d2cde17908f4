import pytest
from notevault.store import NoteStore


@pytest.fixture
def store(fs):
    return NoteStore('/notes')
