"""YAML helpers for note frontmatter.

The frontmatter is written by hand (not by yaml.dump) so that its layout
is stable from one render to the next and readable in an editor. These
helpers escape scalar values and patch a single top-level key in place.
"""

import re

FRONTMATTER_DELIMITER = "---"

# Characters that would change the meaning of a plain scalar
_SPECIAL_CHARS_RE = re.compile(r"[:#{}\[\],&*?|<>=!%@`]")
_EDGE_WHITESPACE_RE = re.compile(r"^[ \t]|[ \t]$")
# A plain scalar may not open with a sequence entry indicator
_SEQUENCE_ENTRY_RE = re.compile(r"^-(?:[ \t]|$)")


def escape_yaml_string(value: str | None) -> str:
    """Escape a scalar value for the frontmatter.

    - empty or None: nothing (the key reads as an empty string)
    - newlines, YAML indicator characters or a leading ``- ``: literal
      block scalar, with an explicit ``|2`` indentation indicator when the
      first line is itself indented
    - contains ``"``: single-quoted
    - contains ``'`` or edge whitespace: double-quoted
    - anything else: plain

    Plain scalars such as ``no`` or ``0x10`` are only strings when the
    frontmatter is read back without type resolution (see Vault).

    Args:
        value: String to escape

    Returns:
        Text to place after ``key: ``
    """
    if not value:
        return ""
    if "\n" in value or _SPECIAL_CHARS_RE.search(value) or _SEQUENCE_ENTRY_RE.search(value):
        indicator = "|2" if value.lstrip("\n")[:1] in (" ", "\t") else "|"
        return indicator + "\n  " + value.replace("\n", "\n  ")
    if '"' in value:
        return "'" + value.replace("'", "''") + "'"
    if "'" in value or _EDGE_WHITESPACE_RE.search(value):
        return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return value


def escape_tag(tag: str) -> str:
    """Quote a tag for the tags list. Tags are always quoted."""
    if '"' in tag:
        return "'" + tag.replace("'", "''") + "'"
    return '"' + tag.replace("\\", "\\\\") + '"'


def split_frontmatter(text: str) -> tuple[list[str], str] | None:
    """Split a document into frontmatter lines and the rest.

    Returns:
        (lines between the delimiters, text after the closing delimiter),
        or None if the document does not start with a frontmatter block.
    """
    lines = text.split("\n")
    if not lines or lines[0].rstrip() != FRONTMATTER_DELIMITER:
        return None
    for index in range(1, len(lines)):
        if lines[index].rstrip() == FRONTMATTER_DELIMITER:
            return lines[1:index], "\n".join(lines[index:])
    return None


def set_frontmatter_field(text: str, key: str, value: str | None) -> str:
    """Return ``text`` with one top-level frontmatter key replaced.

    The key's entry, including any indented continuation lines of a block
    scalar, is rewritten with ``escape_yaml_string(value)``; everything
    else in the document is left byte-for-byte untouched. A missing key is
    appended at the end of the block.

    Raises:
        ValueError: If the document has no frontmatter block.
    """
    parts = split_frontmatter(text)
    if parts is None:
        raise ValueError("Document has no frontmatter block")
    header, rest = parts

    escaped = escape_yaml_string(value)
    replacement = f"{key}: {escaped}".split("\n") if escaped else [f"{key}: "]
    prefix = f"{key}:"

    start = next(
        (i for i, line in enumerate(header) if line == prefix or line.startswith(prefix + " ")),
        None,
    )
    if start is None:
        new_header = header + replacement
    else:
        end = start + 1
        while end < len(header) and (header[end].startswith((" ", "\t")) or not header[end]):
            end += 1
        new_header = header[:start] + replacement + header[end:]

    return "\n".join([FRONTMATTER_DELIMITER, *new_header, rest])
