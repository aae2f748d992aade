"""Definitions and references emitted by per-unit graph artifacts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


@dataclass(frozen=True)
class DefKey:
    """Identity of a definition: repository, unit type, unit name and in-unit path."""

    repo: str = ""
    unit_type: str = ""
    unit: str = ""
    path: str = ""


class _GraphModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            field = cls.model_fields[info.field_name]
            return field.get_default(call_default_factory=True)
        return value


class Def(_GraphModel):
    repo: str = Field(default="", alias="Repo")
    unit_type: str = Field(default="", alias="UnitType")
    unit: str = Field(default="", alias="Unit")
    path: str = Field(default="", alias="Path")
    name: str = Field(default="", alias="Name")
    kind: str = Field(default="", alias="Kind")
    file: str = Field(default="", alias="File")
    start: int = Field(default=0, alias="Start")
    end: int = Field(default=0, alias="End")

    def def_key(self) -> DefKey:
        return DefKey(repo=self.repo, unit_type=self.unit_type, unit=self.unit, path=self.path)


class Ref(_GraphModel):
    def_repo: str = Field(default="", alias="DefRepo")
    def_unit_type: str = Field(default="", alias="DefUnitType")
    def_unit: str = Field(default="", alias="DefUnit")
    def_path: str = Field(default="", alias="DefPath")
    repo: str = Field(default="", alias="Repo")
    unit_type: str = Field(default="", alias="UnitType")
    unit: str = Field(default="", alias="Unit")
    file: str = Field(default="", alias="File")
    start: int = Field(default=0, alias="Start")
    end: int = Field(default=0, alias="End")

    def def_key(self) -> DefKey:
        """Return the key of the definition this reference points at."""
        return DefKey(
            repo=self.def_repo,
            unit_type=self.def_unit_type,
            unit=self.def_unit,
            path=self.def_path,
        )

    def with_def_key(self, key: DefKey) -> "Ref":
        """Return a copy pointing at ``key``; the explicit defining repository is kept."""
        return self.model_copy(
            update={
                "def_unit_type": key.unit_type,
                "def_unit": key.unit,
                "def_path": key.path,
            }
        )


class GraphOutput(_GraphModel):
    """Decoded contents of one graph artifact."""

    defs: List[Def] = Field(default_factory=list, alias="Defs")
    refs: List[Ref] = Field(default_factory=list, alias="Refs")


__all__ = ["Def", "DefKey", "GraphOutput", "Ref"]
