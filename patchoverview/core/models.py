"""
Data types shared across the patch overview pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List


class PatchStatus(str, Enum):
    """Whether a patch is present in the installed package."""
    APPLIED = "Applied"
    NOT_APPLIED = "Not applied"
    UNSURE = "Unsure"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PackageDeclaration:
    """A package resolved in composer.lock."""
    name: str
    type: str = "library"

    @property
    def short_name(self) -> str:
        """Part of the name after the last '/' (vendor/foo -> foo)."""
        return self.name.rsplit("/", 1)[-1]


@dataclass
class InstallPathRule:
    """An installer-paths entry: one template shared by several package types."""
    template: str
    types: List[str] = field(default_factory=list)

    @classmethod
    def from_qualifiers(cls, template: str, qualifiers: List[str]) -> "InstallPathRule":
        # "type:drupal-module" -> "drupal-module"; plain entries are kept whole
        return cls(template=template, types=[q.split(":")[-1] for q in qualifiers])


@dataclass(frozen=True)
class PatchDeclaration:
    """A patch listed for a package under extra.patches.

    `source` is the entry's key, shown in the report; `location` is the
    relative path or URL the patch is read from.
    """
    package: str
    source: str
    location: str


@dataclass
class PatchRecord:
    """Outcome of checking one declared patch."""
    package: str
    install_path: Path
    source: str
    patch_file: Path
    status: PatchStatus
