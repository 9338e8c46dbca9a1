"""
Exceptions raised while building a patch overview.
"""


class PatchOverviewError(Exception):
    """Base class for errors that abort a run."""


class ManifestError(PatchOverviewError):
    """A manifest or lock file is missing, unreadable or malformed."""

    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Could not read {self.path}: {reason}")


class PatchRetrievalError(PatchOverviewError):
    """A remote patch could not be downloaded through any fallback."""

    def __init__(self, url: str, reason: str = "could not be downloaded"):
        self.url = url
        super().__init__(f"The URL {url} {reason}.")


class ToolNotFoundError(PatchOverviewError):
    """An external program is not installed."""

    def __init__(self, program: str):
        self.program = program
        super().__init__(f"Required program '{program}' was not found on PATH")


class ConfigError(PatchOverviewError):
    """A setting from the environment or command line is invalid."""
