"""Closed vocabulary of control-file field names."""

import warnings
from enum import StrEnum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from debfacts.errors import UnrecognizedTagWarning


class ControlTag(StrEnum):
    """Control fields known to appear in binary package stanzas."""

    # identity
    PACKAGE = "Package"
    VERSION = "Version"
    SOURCE = "Source"
    ARCHITECTURE = "Architecture"
    # people
    MAINTAINER = "Maintainer"
    ORIGINAL_MAINTAINER = "Original-Maintainer"
    # relationships
    DEPENDS = "Depends"
    PRE_DEPENDS = "Pre-Depends"
    RECOMMENDS = "Recommends"
    SUGGESTS = "Suggests"
    BREAKS = "Breaks"
    CONFLICTS = "Conflicts"
    REPLACES = "Replaces"
    PROVIDES = "Provides"
    ENHANCES = "Enhances"
    BUILT_USING = "Built-Using"
    # classification
    SECTION = "Section"
    PRIORITY = "Priority"
    MULTI_ARCH = "Multi-Arch"
    HOMEPAGE = "Homepage"
    DESCRIPTION = "Description"
    INSTALLED_SIZE = "Installed-Size"
    ESSENTIAL = "Essential"
    IMPORTANT = "Important"
    BUGS = "Bugs"
    TAG = "Tag"
    TASK = "Task"
    BUILD_IDS = "Build-Ids"
    MODALIASES = "Modaliases"
    # command-not-found
    CNF_VISIBLE_PKGNAME = "Cnf-Visible-Pkgname"
    CNF_EXTRA_COMMANDS = "Cnf-Extra-Commands"
    CNF_IGNORE_COMMANDS = "Cnf-Ignore-Commands"
    # language and runtime tooling
    UBUNTU_OEM_KERNEL_FLAVOUR = "Ubuntu-Oem-Kernel-Flavour"
    RUBY_VERSIONS = "Ruby-Versions"
    LUA_VERSIONS = "Lua-Versions"
    PYTHON_VERSION = "Python-Version"
    PYTHON3_VERSION = "Python3-Version"
    PYTHON_EGG_NAME = "Python-Egg-Name"
    X_CARGO_BUILT_USING = "X-Cargo-Built-Using"
    GHC_PACKAGE = "Ghc-Package"
    GO_IMPORT_PATH = "Go-Import-Path"
    GSTREAMER_ELEMENTS = "Gstreamer-Elements"
    GSTREAMER_ENCODERS = "Gstreamer-Encoders"
    GSTREAMER_DECODERS = "Gstreamer-Decoders"
    GSTREAMER_VERSION = "Gstreamer-Version"
    GSTREAMER_URI_SOURCES = "Gstreamer-Uri-Sources"
    GSTREAMER_URI_SINKS = "Gstreamer-Uri-Sinks"
    ORIGINAL_VCS_GIT = "Original-Vcs-Git"
    ORIGINAL_VCS_BROWSER = "Original-Vcs-Browser"
    EFI_VENDOR = "Efi-Vendor"
    POSTGRESQL_CATVERSION = "Postgresql-Catversion"
    XUL_APPID = "Xul-Appid"
    NPP_APPLICATIONS = "Npp-Applications"
    NPP_DESCRIPTION = "Npp-Description"
    NPP_FILE = "Npp-File"
    NPP_MIMETYPE = "Npp-Mimetype"


class UnknownTag(BaseModel):
    """A field name outside ``ControlTag``, kept verbatim."""

    model_config = ConfigDict(frozen=True)

    name: str


type AnyTag = ControlTag | UnknownTag

TAGS_BY_NAME: MappingProxyType[str, ControlTag] = MappingProxyType({tag.value: tag for tag in ControlTag})


def tag_from_name(name: str) -> AnyTag:
    """Map a control field name onto the vocabulary.

    Never fails: names that are not part of the vocabulary come back as
    ``UnknownTag`` and raise an ``UnrecognizedTagWarning`` so that new fields
    showing up in newer archives get noticed.

    Args:
        name: Field name exactly as written in the stanza

    Returns:
        The matching ``ControlTag``, or ``UnknownTag(name)``
    """
    if (tag := TAGS_BY_NAME.get(name)) is not None:
        return tag
    warnings.warn(
        f"Unknown control field '{name}' (consider adding it to ControlTag)",
        UnrecognizedTagWarning,
        stacklevel=2,
    )
    return UnknownTag(name=name)


def field_name(tag: AnyTag) -> str:
    """Return the control field name for a tag; inverse of ``tag_from_name``."""
    if isinstance(tag, UnknownTag):
        return tag.name
    return tag.value
