"""
Path resolver - works out where Composer installed a package.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Iterable

from .models import InstallPathRule, PackageDeclaration

logger = logging.getLogger(__name__)

NAME_PLACEHOLDERS = ("{$name}", "{name}")
DEFAULT_VENDOR_DIR = "vendor"


def flatten_rules(rules: Iterable[InstallPathRule]) -> Dict[str, str]:
    """Map each package type to its template.

    Rules are applied in declaration order and a later rule overwrites an
    earlier one for the same type.
    """
    templates: Dict[str, str] = {}
    for rule in rules:
        for package_type in rule.types:
            previous = templates.get(package_type)
            if previous is not None and previous != rule.template:
                logger.warning(
                    f"Type '{package_type}' is listed under '{previous}' and '{rule.template}'; using '{rule.template}'"
                )
            templates[package_type] = rule.template
    return templates


class PathResolver:
    """Resolves absolute install directories from installer-paths rules."""

    def __init__(self, root: Path, rules: Iterable[InstallPathRule]):
        self.root = Path(root)
        self.templates = flatten_rules(rules)

    def resolve(self, package: PackageDeclaration) -> Path:
        """Return the absolute install directory of `package`."""
        template = self.templates.get(package.type)
        if template is None:
            relative = f"{DEFAULT_VENDOR_DIR}/{package.short_name}"
        else:
            relative = template
            for placeholder in NAME_PLACEHOLDERS:
                relative = relative.replace(placeholder, package.short_name)

        # abspath collapses the ".." without following symlinks
        return Path(os.path.abspath(os.path.join(str(self.root), "..", relative)))
