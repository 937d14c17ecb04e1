"""Turn a raw ``ControlMap`` into an immutable ``Package`` record."""

import logging

from debfacts.archive import check_required
from debfacts.models import ControlMap, Package
from debfacts.relations import parse_relationship
from debfacts.tags import ControlTag, UnknownTag, tag_from_name

logger = logging.getLogger(__name__)

# Tags copied verbatim into the Package field of the same meaning
PROJECTED_FIELDS: dict[ControlTag, str] = {
    ControlTag.SOURCE: "source",
    ControlTag.ARCHITECTURE: "architecture",
    ControlTag.MAINTAINER: "maintainer",
    ControlTag.ORIGINAL_MAINTAINER: "original_maintainer",
    ControlTag.REPLACES: "replaces",
    ControlTag.SECTION: "section",
    ControlTag.MULTI_ARCH: "multi_arch",
    ControlTag.HOMEPAGE: "homepage",
}


def extended_description(value: str) -> str | None:
    """Return the long part of a Description, without the synopsis line.

    Each continuation line loses the single leading space the stanza format
    adds; the ``.`` paragraph separators are left as they are.
    """
    _, _, rest = value.partition("\n")
    lines = [line.removeprefix(" ") for line in rest.splitlines()]
    text = "\n".join(lines).strip("\n")
    return text or None


def build_package(control: ControlMap) -> Package:
    """Build the ``Package`` record for one archive.

    Args:
        control: Fields and manifest extracted from the archive

    Returns:
        The immutable package record

    Raises:
        MissingRequiredFieldError: Package or Version is absent or empty
        DependencyParseError: The Depends field does not follow the relationship grammar
    """
    check_required(control.fields)
    values: dict[str, object] = {
        "name": control.fields[ControlTag.PACKAGE.value],
        "version": control.fields[ControlTag.VERSION.value],
        "files": control.files,
    }

    for name, value in control.fields.items():
        tag = tag_from_name(name)
        if isinstance(tag, UnknownTag):
            logger.debug(f"Ignoring unknown field '{name}' in {control.path}")
            continue

        match tag:
            case ControlTag.DEPENDS:
                values["depends"] = parse_relationship(value)
            case ControlTag.DESCRIPTION:
                values["description"] = extended_description(value)
            case _ if tag in PROJECTED_FIELDS:
                values[PROJECTED_FIELDS[tag]] = value
            case _:
                pass

    return Package.model_validate(values)
