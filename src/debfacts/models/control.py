from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ControlMap(BaseModel):
    """Raw fields and file manifest read out of one archive.

    Values are kept exactly as they appear in the control stanza, including
    continuation lines. Only lives long enough to build a ``Package``.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    fields: dict[str, str] = Field(default_factory=dict)
    files: tuple[str, ...] = Field(default_factory=tuple)

    def get(self, name: str) -> str | None:
        return self.fields.get(name)
