from typing import Optional, Sequence

class DistFetchError(Exception):
    """base class for exceptions in distfetch."""
    pass

class ConfigError(DistFetchError):
    """raised when a configured setting has an invalid value."""
    pass

class CacheError(DistFetchError):
    """raised when the cache directory cannot be created."""
    pass

class InvalidVersionError(DistFetchError, ValueError):
    """raised when a version string cannot be parsed."""
    pass

class MirrorResolutionError(DistFetchError):
    """raised when the preferred mirror cannot be resolved."""
    pass

class ShellCommandError(DistFetchError):
    """raised when an external command fails, times out or cannot be started."""
    def __init__(self, command: Sequence[str], returncode: Optional[int] = None, reason: Optional[str] = None):
        self.command = list(command)
        self.returncode = returncode
        self.reason = reason
        message = f"Fail to run shell commands: {' '.join(self.command)}"
        if returncode is not None:
            message += f" (exit code {returncode})"
        if reason:
            message += f" ({reason})"
        super().__init__(message)

class DownloadError(DistFetchError):
    """raised when an artifact could not be downloaded from any location."""
    def __init__(self, project: str, version: str, message: Optional[str] = None):
        self.project = project
        self.version = version
        super().__init__(message or f"Fail to download {project} {version}")
