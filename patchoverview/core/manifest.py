"""
Manifest reader - loads composer.json and composer.lock from the project directory.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .errors import ManifestError
from .models import InstallPathRule, PackageDeclaration, PatchDeclaration

logger = logging.getLogger(__name__)

MANIFEST_FILE = "composer.json"
LOCK_FILE = "composer.lock"


@dataclass
class ComposerProject:
    """Everything the overview needs from the two composer files."""
    packages: List[PackageDeclaration] = field(default_factory=list)
    install_rules: List[InstallPathRule] = field(default_factory=list)
    patches: Dict[str, List[PatchDeclaration]] = field(default_factory=dict)

    def patches_for(self, package: str) -> List[PatchDeclaration]:
        return self.patches.get(package, [])


def load_json(path: Path) -> Dict[str, Any]:
    """Read a JSON object from `path`, raising ManifestError on any failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ManifestError(path, e.strerror or str(e)) from e
    except ValueError as e:
        raise ManifestError(path, f"invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise ManifestError(path, "expected a JSON object at the top level")
    logger.info(f"Loaded {path}")
    return data


class ManifestReader:
    """Reads composer.json and composer.lock from a project directory."""

    def __init__(self, project_dir: Path, include_dev: bool = True):
        self.project_dir = Path(project_dir)
        self.include_dev = include_dev

    @property
    def manifest_path(self) -> Path:
        return self.project_dir / MANIFEST_FILE

    @property
    def lock_path(self) -> Path:
        return self.project_dir / LOCK_FILE

    def read(self) -> ComposerProject:
        """Load both files and return the parsed project."""
        manifest = load_json(self.manifest_path)
        lock = load_json(self.lock_path)

        extra = manifest.get("extra") or {}
        if not isinstance(extra, dict):
            raise ManifestError(self.manifest_path, "'extra' must be an object")

        patches = self._parse_patches(extra.get("patches") or {}, self.manifest_path)
        if extra.get("patches-file"):
            patches_file = self.project_dir / extra["patches-file"]
            external = load_json(patches_file).get("patches") or {}
            for package, declarations in self._parse_patches(external, patches_file).items():
                known = {d.source for d in patches.get(package, [])}
                patches.setdefault(package, []).extend(d for d in declarations if d.source not in known)

        return ComposerProject(
            packages=self._parse_packages(lock),
            install_rules=self._parse_install_rules(extra.get("installer-paths") or {}),
            patches=patches,
        )

    def _parse_install_rules(self, installer_paths: Any) -> List[InstallPathRule]:
        if not isinstance(installer_paths, dict):
            raise ManifestError(self.manifest_path, "'extra.installer-paths' must be an object")

        rules = []
        for template, qualifiers in installer_paths.items():
            if not isinstance(qualifiers, list):
                raise ManifestError(self.manifest_path, f"installer path '{template}' must map to a list")
            rules.append(InstallPathRule.from_qualifiers(template, [str(q) for q in qualifiers]))
        return rules

    def _parse_packages(self, lock: Dict[str, Any]) -> List[PackageDeclaration]:
        sections = ["packages", "packages-dev"] if self.include_dev else ["packages"]

        packages = []
        for section in sections:
            entries = lock.get(section) or []
            if not isinstance(entries, list):
                raise ManifestError(self.lock_path, f"'{section}' must be a list")
            for entry in entries:
                if not isinstance(entry, dict) or "name" not in entry:
                    raise ManifestError(self.lock_path, f"every entry in '{section}' needs a name")
                packages.append(PackageDeclaration(name=entry["name"], type=entry.get("type") or "library"))
        return packages

    @staticmethod
    def _parse_patches(section: Any, path: Path) -> Dict[str, List[PatchDeclaration]]:
        """Parse {package: {description: location}}, the composer-patches layout.

        A location given as an object is read from its `url` key. A list of
        {description, url} objects is accepted too.
        """
        if not isinstance(section, dict):
            raise ManifestError(path, "'patches' must be an object")

        patches: Dict[str, List[PatchDeclaration]] = {}
        for package, entries in section.items():
            declarations = []
            if isinstance(entries, dict):
                for source, location in entries.items():
                    if isinstance(location, dict):
                        location = location.get("url")
                    if not isinstance(location, str) or not location:
                        raise ManifestError(path, f"patch '{source}' for '{package}' has no location")
                    declarations.append(PatchDeclaration(package, source, location))
            elif isinstance(entries, list):
                for entry in entries:
                    if not isinstance(entry, dict) or not entry.get("url"):
                        raise ManifestError(path, f"patch entries for '{package}' need a url")
                    source = entry.get("description") or entry["url"]
                    declarations.append(PatchDeclaration(package, str(source), entry["url"]))
            else:
                raise ManifestError(path, f"patches for '{package}' must be an object or a list")
            patches[package] = declarations
        return patches
