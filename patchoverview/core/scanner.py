"""
Core scanner for Patch Overview - ties the manifest, install paths, patch files and status checks together.
"""

import logging
from typing import List, Optional

import requests

from ..config import Settings
from .locator import PatchLocator
from .manifest import ComposerProject, ManifestReader
from .models import PatchRecord
from .paths import PathResolver
from .process import ProcessRunner, SubprocessRunner
from .status import StatusChecker

logger = logging.getLogger(__name__)


class PatchOverviewScanner:
    """Main scanner class that produces one PatchRecord per declared patch."""

    def __init__(
        self,
        settings: Settings,
        runner: Optional[ProcessRunner] = None,
        session: Optional[requests.Session] = None,
    ):
        self.settings = settings
        self.runner = runner or SubprocessRunner()
        self.reader = ManifestReader(settings.project_dir, include_dev=settings.include_dev)
        self.locator = PatchLocator(
            settings.root,
            runner=self.runner,
            timeout=settings.download_timeout,
            user=settings.http_user,
            password=settings.http_password,
            session=session,
        )
        self.checker = StatusChecker(self.runner)

    def scan(self) -> List[PatchRecord]:
        """Check every declared patch of every locked package, in lock order."""
        logger.info(f"Reading composer files from {self.settings.project_dir}")
        project = self.reader.read()
        return self.scan_project(project)

    def scan_project(self, project: ComposerProject) -> List[PatchRecord]:
        resolver = PathResolver(self.settings.root, project.install_rules)

        records = []
        for package in project.packages:
            declarations = project.patches_for(package.name)
            if not declarations:
                continue

            install_path = resolver.resolve(package)
            logger.info(f"Checking {len(declarations)} patch(es) for {package.name} in {install_path}")

            for declaration in declarations:
                with self.locator.locate(declaration.location) as patch_file:
                    status = self.checker.check(install_path, patch_file)
                records.append(PatchRecord(
                    package=package.name,
                    install_path=install_path,
                    source=declaration.source,
                    patch_file=patch_file,
                    status=status,
                ))
                logger.info(f"{package.name}: {declaration.source} -> {status}")

        return records
