"""Renders the markdown blocks that :class:`notevault.store.NoteStore` appends to notes, and parses hashtags.

The block layouts are fixed, since other tools parse them back out of the notes:

Link list (from :meth:`notevault.store.NoteStore.link_notes`)::

    <blank line>
     - Label
    \t - [[target-one]]
    \t - [[target-two]]

Tags (from :meth:`notevault.store.NoteStore.add_tags`)::

    <blank line>
    - Tags
    \t- #first
    - #second
    <blank line>

Table (from :meth:`notevault.store.NoteStore.apply_table`)::

    | H1 | H2 |
    | --- | --- |
    | v1 | v2 |
"""

import re
from typing import List, Sequence

from mako.template import Template

TAG_RE = re.compile(r'#\w+')

LINKS_TEMPLATE = Template(
    '\n'
    ' - ${label}\n'
    '% for target in targets:\n'
    '\t - [[${target}]]\n'
    '% endfor\n'
)

# The trailing backslash makes Mako drop the newline, so the first tag shares the tab's line.
TAGS_TEMPLATE = Template(
    '\n'
    '- Tags\n'
    '\t\\\n'
    '% for tag in tags:\n'
    '- #${tag}\n'
    '% endfor\n'
    '\n'
)

TABLE_TEMPLATE = Template(
    '${row(header)}\n'
    '${row(divider)}\n'
    '% for cells in data_rows:\n'
    '${row(cells)}\n'
    '% endfor\n'
)


def _table_row(cells: Sequence[str]) -> str:
    return ''.join(f'| {cell} ' for cell in cells) + '|'


def format_links(label: str, targets: Sequence[str]) -> str:
    """Returns a sub-list titled ``label`` with one wiki link per target."""
    return LINKS_TEMPLATE.render(label=label, targets=targets)


def format_tags(tags: Sequence[str]) -> str:
    """Returns a "Tags" list with one ``#tag`` bullet per tag."""
    return TAGS_TEMPLATE.render(tags=tags)


def format_table(rows: Sequence[Sequence[str]]) -> str:
    """Returns a pipe table; the first row is the header.

    Callers are responsible for passing a non-empty, rectangular grid.
    """
    header = rows[0]
    return TABLE_TEMPLATE.render(row=_table_row,
                                 header=header,
                                 divider=['---'] * len(header),
                                 data_rows=rows[1:])


def extract_tags(text: str) -> List[str]:
    """Returns every hashtag in the text, including the ``#``, in order of appearance.

    Duplicates are kept. A hashtag is ``#`` followed by one or more word characters
    (letters, digits, underscore), wherever it appears, so ``foo#bar`` yields ``#bar``.
    """
    return TAG_RE.findall(text)
