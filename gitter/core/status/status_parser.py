"""Decoders for the machine-readable output of ``git status``.

Two wire forms are supported:

- ``-z`` (canonical): records are NUL-terminated and paths are never
  quoted. A renamed or copied record is followed by one extra NUL-terminated
  field holding the origin path, i.e. ``XY PATH\\0ORIG_PATH\\0`` - the
  destination comes first, the reverse of the textual form.
- short/porcelain (legacy): records are newline-terminated, renames are
  written ``XY ORIG_PATH -> PATH`` and any path containing whitespace or
  other special characters is quoted like a C string literal.

Decoding never raises on malformed input: whatever codes and paths can be
scanned are returned. The input is produced by git, so a deviation from the
grammar is a bug in the producer rather than something to report per record.
"""

import logging
from collections.abc import Callable

from gitter.domain.entities import StatusCode, StatusEntry, StatusResult

logger = logging.getLogger(__name__)

_QUOTE = '"'
_BACKSLASH = "\\"
_SPACE = " "
_ARROW = " -> "
_OCTAL_DIGITS = "01234567"

# C-style escapes git uses when quoting paths (see core.quotePath)
_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


def _to_text(stdout: str | bytes) -> str:
    if isinstance(stdout, bytes):
        return stdout.decode("utf-8", errors="replace")
    return stdout


def _parse_codes(record: str) -> tuple[StatusCode | str, StatusCode | str]:
    """Extract the fixed-width staging and worktree codes of a record."""
    staging = StatusCode.from_char(record[0]) if len(record) > 0 else StatusCode.UNMODIFIED
    worktree = StatusCode.from_char(record[1]) if len(record) > 1 else StatusCode.UNMODIFIED
    return staging, worktree


def _has_origin(staging: StatusCode | str, worktree: StatusCode | str) -> bool:
    return any(code in (StatusCode.RENAMED, StatusCode.COPIED) for code in (staging, worktree))


def parse_status_z(stdout: str | bytes) -> StatusResult:
    """Decode the output of ``git status --porcelain -z``.

    Args:
        stdout: Raw stdout of the status command.

    Returns:
        StatusResult keyed by the current (destination) path of each entry.
    """
    status = StatusResult()
    fields = iter(_to_text(stdout).split("\0"))

    for record in fields:
        # Trailing delimiter leaves an empty final field
        if not record:
            continue

        staging, worktree = _parse_codes(record)
        # Untracked and tracked paths alike are verbatim in -z mode
        name = record[3:]
        extra = ""
        if _has_origin(staging, worktree):
            extra = next(fields, "")
            if not extra:
                logger.debug("Rename/copy record for '%s' has no origin path", name)

        status[name] = StatusEntry(path=name, staging=staging, worktree=worktree, extra=extra)

    return status


def parse_status_porcelain(stdout: str | bytes) -> StatusResult:
    """Decode the newline-delimited short format of ``git status --porcelain``.

    Args:
        stdout: Raw stdout of the status command.

    Returns:
        StatusResult keyed by the current (destination) path of each entry.
    """
    status = StatusResult()

    for line in _to_text(stdout).split("\n"):
        if not line:
            continue

        staging, worktree = _parse_codes(line)

        # Untracked paths are never quoted:
        #   ?? asdf fdsa
        # so they are taken as-is.
        if staging == StatusCode.UNTRACKED:
            name, extra = line[3:], ""
        else:
            # Tracked paths are quoted when needed:
            #   A  "RE DME .md"
            #   R  old.txt -> "new name.txt"
            name, extra = parse_status_name_extra(line[3:])

        status[name] = StatusEntry(path=name, staging=staging, worktree=worktree, extra=extra)

    return status


def _append(buffer: bytearray, text: str) -> None:
    buffer += text.encode("utf-8", errors="surrogatepass")


def _decode(buffer: bytearray) -> str:
    return buffer.decode("utf-8", errors="replace")


def _unescape(text: str, index: int, buffer: bytearray) -> int:
    """Decode the escape sequence starting at ``text[index]`` (after the backslash).

    Returns:
        Index of the first character after the escape sequence.
    """
    char = text[index]
    if char in _OCTAL_DIGITS:
        end = index
        while end < len(text) and end - index < 3 and text[end] in _OCTAL_DIGITS:
            end += 1
        # Octal escapes encode raw UTF-8 bytes one at a time
        buffer.append(int(text[index:end], 8) & 0xFF)
        return end
    _append(buffer, _ESCAPES.get(char, char))
    return index + 1


def parse_status_name_extra(name_extra: str) -> tuple[str, str]:
    """Split the path portion of a short-format status record.

    The path portion has one of the forms::

        PATH
        ORIG_PATH -> PATH

    where either field may be quoted like a C string literal: surrounded by
    double quotes, with interior special characters backslash-escaped. The
    scan tracks quote state one character at a time; an escaped quote inside
    a quoted field is literal, and the first unquoted space ends the origin
    field (the ``-> `` that follows it is skipped).

    Args:
        name_extra: Record text following the two status codes and the space.

    Returns:
        Tuple of (path, origin path). The origin is empty when the record
        carries only one path.
    """
    extra = ""
    buffer = bytearray()
    in_quote = False
    index = 0

    while index < len(name_extra):
        char = name_extra[index]

        if in_quote:
            if char == _BACKSLASH and index + 1 < len(name_extra):
                index = _unescape(name_extra, index + 1, buffer)
                continue
            if char == _QUOTE:
                in_quote = False
            else:
                _append(buffer, char)
            index += 1
            continue

        if char == _QUOTE:
            in_quote = True
        elif char == _SPACE:
            extra = _decode(buffer)
            buffer.clear()
            if name_extra.startswith(_ARROW, index):
                index += len(_ARROW)
                continue
        else:
            _append(buffer, char)
        index += 1

    return _decode(buffer), extra


STATUS_PARSERS: dict[str, Callable[[str | bytes], StatusResult]] = {
    "z": parse_status_z,
    "porcelain": parse_status_porcelain,
}


def get_status_parser(status_format: str) -> Callable[[str | bytes], StatusResult]:
    """Look up the decoder for a status wire format.

    Raises:
        ValueError: If the format is unknown.
    """
    try:
        return STATUS_PARSERS[status_format]
    except KeyError:
        raise ValueError(
            f"Unknown status format '{status_format}' "
            f"(expected one of: {', '.join(STATUS_PARSERS)})"
        ) from None
