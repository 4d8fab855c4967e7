"""Filesystem-backed vault of Markdown notes.

All paths handed to and returned by Vault are vault-relative POSIX
strings (``Hoarder/2024-01-05-My-Title.md``), the same form used inside
notes for image embeds. The vault root itself is never exposed in notes.
"""

import logging
from pathlib import Path, PurePosixPath
from typing import Any

import frontmatter
import yaml
from frontmatter.default_handlers import YAMLHandler

from hoarder_sync.output.yaml_format import set_frontmatter_field

logger = logging.getLogger(__name__)


class TextYAMLHandler(YAMLHandler):
    """YAML frontmatter handler that keeps every scalar a string.

    The default SafeLoader resolves YAML 1.1 types, so a note reading
    `no` would come back as False and `0x10` as 16.
    """

    def load(self, fm, **kwargs):
        kwargs.setdefault("Loader", yaml.BaseLoader)
        return super().load(fm, **kwargs)


class Vault:
    """File operations on a notes vault.

    Attributes:
        root: Absolute directory that vault paths are relative to.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root).expanduser().resolve()

    def resolve(self, path: str) -> Path:
        """Absolute filesystem path for a vault path.

        Raises:
            ValueError: If ``path`` escapes the vault root.
        """
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"Path escapes the vault: {path}")
        return self.root.joinpath(*relative.parts)

    def relative(self, path: str | Path) -> str | None:
        """Vault path for an absolute filesystem path, None if outside."""
        try:
            return Path(path).resolve().relative_to(self.root).as_posix()
        except ValueError:
            return None

    def exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    def create_folder(self, path: str) -> None:
        self.resolve(path).mkdir(parents=True, exist_ok=True)

    def create(self, path: str, content: str) -> None:
        """Create a new note.

        Raises:
            FileExistsError: If the note already exists.
        """
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "x", encoding="utf-8", newline="") as f:
            f.write(content)

    def read(self, path: str) -> str:
        with open(self.resolve(path), encoding="utf-8", newline="") as f:
            return f.read()

    def write(self, path: str, content: str) -> None:
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8", newline="") as f:
            f.write(content)

    def write_binary(self, path: str, data: bytes) -> None:
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def get_frontmatter(self, path: str) -> dict[str, Any] | None:
        """Parsed frontmatter of a note.

        Scalars are returned as the strings that were written; an empty
        value reads as "".

        Returns:
            The metadata mapping, or None when the note has no frontmatter
            or it is not valid YAML.
        """
        try:
            post = frontmatter.loads(self.read(path), handler=TextYAMLHandler())
        except yaml.YAMLError as e:
            logger.warning("Invalid frontmatter in %s: %s", path, e)
            return None
        return dict(post.metadata) or None

    def set_frontmatter_field(self, path: str, key: str, value: str | None) -> None:
        """Rewrite one frontmatter key, leaving the rest of the note as is."""
        self.write(path, set_frontmatter_field(self.read(path), key, value))
