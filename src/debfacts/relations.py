"""Parser for Debian relationship fields (Depends and friends).

A field such as ``libc6 (>= 2.29), libqt5gui5 (>= 5.5) | libqt5gui5-gles (>= 5.5)``
reads as: libc6 AND (libqt5gui5 OR libqt5gui5-gles). Commas separate groups,
pipes separate alternatives inside a group.

See https://www.debian.org/doc/debian-policy/ch-relationships.html
"""

from debfacts.errors import InvalidConstraintError, UnknownComparatorError
from debfacts.models import Comparator, Dependency, VersionConstraint

COMPARATORS: dict[str, Comparator] = {comparator.value: comparator for comparator in Comparator}


def parse_comparator(token: str) -> Comparator:
    """Look up one of the five comparator literals; anything else is an error."""
    try:
        return COMPARATORS[token]
    except KeyError:
        raise UnknownComparatorError(token) from None


def parse_constraint(text: str) -> VersionConstraint:
    """Parse the inside of a parenthesized constraint, e.g. ``>= 2.29``.

    Versions never contain whitespace, so the last space separates the
    comparator from the version.
    """
    text = text.strip()
    comparator, sep, version = text.rpartition(" ")
    if not sep or not version:
        raise InvalidConstraintError(text)
    return VersionConstraint(comparator=parse_comparator(comparator.strip()), version=version)


def parse_alternative(text: str) -> tuple[str, VersionConstraint | None]:
    """Split one OR-alternative into its package name and optional constraint."""
    mid = text.rfind("(")
    if mid == -1:
        return text.strip(), None

    name = text[:mid].strip()
    constraint = text[mid:].strip().removeprefix("(").removesuffix(")")
    return name, parse_constraint(constraint)


def parse_group(text: str) -> Dependency | None:
    """Parse one comma-separated group; returns None for an empty group."""
    if not text.strip():
        return None

    alternatives: list[str] = []
    constraints: list[VersionConstraint | None] = []
    for alt in text.split("|"):
        name, constraint = parse_alternative(alt)
        alternatives.append(name)
        constraints.append(constraint)
    return Dependency(alternatives=alternatives, constraints=constraints)


def parse_relationship(text: str) -> list[Dependency]:
    """Parse a whole relationship field into its AND-groups.

    Args:
        text: Raw field value; continuation lines are fine

    Returns:
        One ``Dependency`` per comma-separated group, in field order

    Raises:
        UnknownComparatorError: A constraint uses a comparator outside ``<< <= = >= >>``
        InvalidConstraintError: A constraint has no space between comparator and version
    """
    dependencies = []
    for group in text.split(","):
        if (dependency := parse_group(group)) is not None:
            dependencies.append(dependency)
    return dependencies
