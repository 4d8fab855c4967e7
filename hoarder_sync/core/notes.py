"""Reading the reconciled Notes section back out of a note.

Each note carries two copies of the bookmark's note: the editable
``## Notes`` section in the body, and the ``original_note`` frontmatter
marker holding the value as of the last successful reconciliation.
A difference between the two is a local edit.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from hoarder_sync.core.vault import Vault

logger = logging.getLogger(__name__)

NOTES_HEADING = "## Notes"

# Section body runs until the next heading, the Visit Link line, or EOF.
_NOTES_SECTION_RE = re.compile(r"## Notes\n\n(.*?)(?=\n##|\n\[|\Z)", re.DOTALL)


@dataclass
class NoteSnapshot:
    """Notes state of one note file.

    Attributes:
        current_notes: Trimmed text of the Notes section, None if absent.
        original_notes: The ``original_note`` marker, None if absent or empty.
        bookmark_id: The ``bookmark_id`` frontmatter value, None if absent.
    """

    current_notes: Optional[str] = None
    original_notes: Optional[str] = None
    bookmark_id: Optional[str] = None


def extract_notes_section(content: str) -> Optional[str]:
    """Trimmed text of the Notes section, or None if there is none."""
    match = _NOTES_SECTION_RE.search(content)
    return match.group(1).strip() if match else None


def read_note_snapshot(vault: Vault, path: str) -> NoteSnapshot:
    """Read the notes state of ``path``.

    Unreadable files yield an empty snapshot instead of raising.
    """
    try:
        content = vault.read(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return NoteSnapshot()

    metadata = vault.get_frontmatter(path) or {}
    return NoteSnapshot(
        current_notes=extract_notes_section(content),
        original_notes=_as_text(metadata.get("original_note")),
        bookmark_id=_as_text(metadata.get("bookmark_id")),
    )


def is_local_edit(
    current: Optional[str], original: Optional[str], remote: Optional[str]
) -> bool:
    """Decide whether local notes are an edit that must be pushed.

    Both local values must be known, the notes must differ from the last
    reconciled value, and they must differ from what the server already
    has (otherwise the edit has already been synced).
    """
    if current is None or original is None:
        return False
    return current != original and current != (remote or "")


def _as_text(value: object) -> Optional[str]:
    # Block scalars keep a trailing newline; the Notes section is trimmed.
    if value is None:
        return None
    text = str(value).strip()
    return text or None
