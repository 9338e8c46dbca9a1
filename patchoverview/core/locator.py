"""
Patch locator - turns a declared patch source into a local file.

Local sources are resolved against the Drupal root. Remote sources are
downloaded with wget or curl, falling back to an in-process fetch.
"""

import logging
import os
import re
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional
from urllib.parse import urlparse

import requests

from ..config import DEFAULT_DOWNLOAD_TIMEOUT
from .errors import PatchRetrievalError
from .process import ProcessRunner, SubprocessRunner

logger = logging.getLogger(__name__)

DOWNLOAD_TOOLS = ("wget", "curl")
TEMP_PREFIX = "download_file"
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")


def is_url(source: str) -> bool:
    """True for well-formed absolute URLs such as https://example.com/fix.patch."""
    if not source or any(ch.isspace() for ch in source):
        return False
    try:
        parsed = urlparse(source)
    except ValueError:
        return False
    return bool(_SCHEME.match(parsed.scheme) and parsed.netloc)


def _not_empty(path: Path) -> bool:
    return path.is_file() and path.stat().st_size > 0


class PatchLocator:
    """Finds or fetches patch files."""

    def __init__(
        self,
        root: Path,
        runner: Optional[ProcessRunner] = None,
        timeout: int = DEFAULT_DOWNLOAD_TIMEOUT,
        user: Optional[str] = None,
        password: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.root = Path(root)
        self.runner = runner or SubprocessRunner()
        self.timeout = timeout
        self.user = user
        self.password = password
        self.session = session or requests.Session()
        self._tool: Optional[str] = None
        self._tool_probed = False

    @contextmanager
    def locate(self, location: str) -> Iterator[Path]:
        """Yield a local path for `location`; downloaded files are removed on exit."""
        if not is_url(location):
            # Joined as text so an absolute location still lands under the root
            yield Path(f"{self.root}/{location}")
            return

        path = self.download(location)
        try:
            yield path
        finally:
            try:
                path.unlink()
            except FileNotFoundError:
                pass

    def download(self, url: str, destination: Optional[Path] = None, overwrite: bool = True) -> Path:
        """Download `url` to a temporary file, or to `destination` when given."""
        fd, name = tempfile.mkstemp(prefix=TEMP_PREFIX)
        os.close(fd)
        tmp = Path(name)

        try:
            tool = self.download_tool()
            if tool is not None:
                exit_code = self.runner.run(self._tool_args(tool, url, tmp))
                if exit_code != 0:
                    logger.warning(f"{tool} exited with {exit_code} for {url}")

            if not _not_empty(tmp):
                self._fetch(url, tmp)

            if not _not_empty(tmp):
                raise PatchRetrievalError(url)

            if destination is None:
                logger.info(f"Downloaded {url} to {tmp}")
                return tmp

            destination = Path(destination)
            if destination.exists() and not overwrite:
                raise PatchRetrievalError(url, f"was downloaded but {destination} already exists")
            os.replace(tmp, destination)
            logger.info(f"Downloaded {url} to {destination}")
            return destination
        except BaseException:
            if tmp.exists():
                tmp.unlink()
            raise

    def download_tool(self) -> Optional[str]:
        """First installed download program, probed once per locator."""
        if not self._tool_probed:
            self._tool = next((tool for tool in DOWNLOAD_TOOLS if self.runner.exists(tool)), None)
            self._tool_probed = True
            logger.debug(f"Download tool: {self._tool or 'none, using direct fetch'}")
        return self._tool

    def _credentials(self) -> bool:
        return bool(self.user and self.password)

    def _tool_args(self, tool: str, url: str, destination: Path) -> List[str]:
        if tool == "wget":
            args = ["wget", "-q", f"--timeout={self.timeout}"]
            if self._credentials():
                args += [f"--user={self.user}", f"--password={self.password}"]
            return args + ["-O", str(destination), url]

        args = ["curl", "-s", "-L", "--connect-timeout", str(self.timeout)]
        if self._credentials():
            args += ["--user", f"{self.user}:{self.password}"]
        return args + ["-o", str(destination), url]

    def _fetch(self, url: str, destination: Path):
        """In-process fallback; leaves `destination` empty on failure."""
        auth = (self.user, self.password) if self._credentials() else None
        try:
            response = self.session.get(url, timeout=self.timeout, auth=auth)
        except requests.RequestException as e:
            logger.warning(f"Direct fetch of {url} failed: {e}")
            return

        if not response.ok:
            logger.warning(f"Direct fetch of {url} returned HTTP {response.status_code}")
            return
        if response.content:
            destination.write_bytes(response.content)
