import os
from pathlib import Path
from typing import Dict, Optional
from pydantic import BaseModel, Field, ValidationError

from .domain.errors import ConfigError

CONFIG_DIR = Path.home() / ".distfetch"
CONFIG_FILE = CONFIG_DIR / "config"
ENV_PREFIX = "DISTFETCH_"

MIRROR_ENDPOINT = "https://www.apache.org/dyn/closer.lua?preferred=true"
ARCHIVE_URL = "https://archive.apache.org/dist"
MAVEN_REPOSITORY = "https://repo1.maven.org/maven2"

class Settings(BaseModel):
    """runtime settings for downloading distributions."""
    cache_root: Path = Field(default_factory=lambda: Path.home() / ".cache")
    mirror_endpoint: str = MIRROR_ENDPOINT
    archive_url: str = ARCHIVE_URL
    maven_repository: str = MAVEN_REPOSITORY
    command_timeout: Optional[float] = None  # seconds, None waits forever
    http_timeout: float = 10.0
    log_interval: float = 5.0

def read_config_file(config_file: Path = CONFIG_FILE) -> Dict[str, str]:
    """read DISTFETCH_* entries from a KEY=value config file."""
    values = {}
    if not config_file.exists():
        return values

    try:
        with open(config_file, "r") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                values[key.strip()] = value.strip()
    except (IOError, PermissionError, OSError):
        # if we can't read the file, fall back to defaults
        return {}
    return values

def load_settings(config_file: Path = CONFIG_FILE, environ: Optional[Dict[str, str]] = None) -> Settings:
    """
    build settings from defaults, the config file and the environment.

    args:
        config_file: path of the KEY=value config file
        environ: environment mapping, defaults to os.environ

    returns:
        validated Settings, environment values winning over the file.

    raises:
        ConfigError: if a value cannot be converted to its setting type
    """
    environ = os.environ if environ is None else environ
    raw = read_config_file(config_file)
    raw.update({k: v for k, v in environ.items() if k.startswith(ENV_PREFIX)})

    overrides = {}
    for field in Settings.model_fields:
        value = raw.get(f"{ENV_PREFIX}{field.upper()}")
        if value is None:
            continue
        if field == "cache_root":
            overrides[field] = Path(value).expanduser()
        elif field == "command_timeout" and value.lower() in ("", "none"):
            overrides[field] = None
        else:
            overrides[field] = value
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigError(f"Invalid distfetch settings: {e}") from e
