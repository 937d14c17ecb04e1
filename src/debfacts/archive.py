"""Read control metadata and the file manifest out of a binary package archive."""

import logging
from pathlib import Path

from debian import deb822
from debian.debfile import DebFile

from debfacts.errors import IngestIOError, MalformedArchiveError, MissingRequiredFieldError
from debfacts.models import ControlMap
from debfacts.tags import ControlTag

logger = logging.getLogger(__name__)

CONTROL_FILE = "control"
REQUIRED_TAGS = (ControlTag.PACKAGE, ControlTag.VERSION)


def check_required(fields: dict[str, str]) -> None:
    """Raise ``MissingRequiredFieldError`` for the first required tag that is absent or blank."""
    for tag in REQUIRED_TAGS:
        if not fields.get(tag.value, "").strip():
            raise MissingRequiredFieldError(tag.value)


def parse_stanza(text: str) -> dict[str, str]:
    """Parse a control stanza into an ordered field -> value mapping.

    Lines starting with whitespace continue the previous field; multi-line
    values such as Description are returned verbatim.

    Args:
        text: Contents of the control file

    Returns:
        Field names mapped to their raw values, in stanza order

    Raises:
        MissingRequiredFieldError: Package or Version is absent or empty
    """
    fields = dict(deb822.Deb822(text))
    check_required(fields)
    return fields


def read_control_text(deb: DebFile) -> str:
    """Decompress the control member and return the control file's text."""
    try:
        raw = deb.control.get_content(CONTROL_FILE)
    except Exception as e:
        raise MalformedArchiveError(f"unreadable control member ({e})") from e
    if raw is None:
        raise MalformedArchiveError("control member has no control file")
    return raw.decode("utf-8", errors="replace")


def read_manifest(deb: DebFile) -> tuple[str, ...]:
    """Enumerate entry names of the data member without reading file contents."""
    try:
        return tuple(deb.data.tgz().getnames())
    except Exception as e:
        raise MalformedArchiveError(f"unreadable data member ({e})") from e


def extract_control_map(path: Path) -> ControlMap:
    """Extract the control fields and file manifest of one ``.deb`` archive.

    Extraction is all-or-nothing: either a complete ``ControlMap`` is returned
    or an ``IngestError`` is raised.

    Args:
        path: Path to the archive

    Returns:
        The archive's raw control fields and data manifest

    Raises:
        IngestIOError: The file could not be opened
        MalformedArchiveError: Bad container, missing member, or decompression failure
        MissingRequiredFieldError: The stanza lacks Package or Version
    """
    try:
        handle = path.open("rb")
    except OSError as e:
        raise IngestIOError(e.strerror or str(e)) from e

    with handle:
        try:
            deb = DebFile(fileobj=handle)
        except Exception as e:
            raise MalformedArchiveError(f"not a valid .deb container ({e})") from e

        text = read_control_text(deb)
        try:
            fields = parse_stanza(text)
        except MissingRequiredFieldError:
            raise
        except Exception as e:
            raise MalformedArchiveError(f"unparseable control stanza ({e})") from e
        files = read_manifest(deb)

    logger.debug(f"Extracted {fields['Package']} {fields['Version']} ({len(files)} files) from {path}")
    return ControlMap(path=path, fields=fields, files=files)
