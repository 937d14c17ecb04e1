from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

type OptionalStr = str | None
StrTupleField = Annotated[tuple[str, ...], Field(default_factory=tuple)]


class Comparator(StrEnum):
    """Version relation allowed inside a dependency constraint."""

    STRICTLY_EARLIER = "<<"
    EARLIER_OR_EQUAL = "<="
    EXACTLY_EQUAL = "="
    LATER_OR_EQUAL = ">="
    STRICTLY_LATER = ">>"


class VersionConstraint(BaseModel):
    """A comparator paired with the version it compares against, e.g. ``(>= 2.29)``."""

    model_config = ConfigDict(frozen=True)

    comparator: Comparator
    version: str


class Dependency(BaseModel):
    """One comma-separated relationship group.

    ``alternatives`` and ``constraints`` are parallel: index ``i`` of both
    describes the same OR-alternative, and their order is the order of
    preference written in the control file.
    """

    model_config = ConfigDict(frozen=True)

    alternatives: StrTupleField
    constraints: Annotated[tuple[VersionConstraint | None, ...], Field(default_factory=tuple)]

    @model_validator(mode="after")
    def _check_parallel(self) -> Self:
        if len(self.alternatives) != len(self.constraints):
            raise ValueError(
                f"{len(self.alternatives)} alternatives but {len(self.constraints)} constraints"
            )
        return self


class Package(BaseModel):
    """Facts extracted from a single binary package archive."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    source: OptionalStr = None
    architecture: OptionalStr = None
    maintainer: OptionalStr = None
    original_maintainer: OptionalStr = None
    replaces: OptionalStr = None
    section: OptionalStr = None
    multi_arch: OptionalStr = None
    homepage: OptionalStr = None
    description: OptionalStr = None
    files: StrTupleField
    depends: Annotated[tuple[Dependency, ...], Field(default_factory=tuple)]
