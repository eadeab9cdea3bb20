"""download spark, flink and hadoop distributions for integration tests."""
from pathlib import Path
from typing import Optional

from .config import Settings, load_settings
from .domain.errors import (
    DistFetchError,
    CacheError,
    ConfigError,
    DownloadError,
    InvalidVersionError,
    MirrorResolutionError,
    ShellCommandError,
)
from .fetch.archive import ArchiveFetcher
from .fetch.cache import LocalCache
from .fetch.mirror import MirrorResolver
from .services.download import DownloadService
from .shell.runner import ShellRunner
from .ui.progress import ProgressManager

__all__ = [
    "Settings",
    "load_settings",
    "DistFetchError",
    "CacheError",
    "ConfigError",
    "DownloadError",
    "InvalidVersionError",
    "MirrorResolutionError",
    "ShellCommandError",
    "DownloadService",
    "get_download_service",
    "download_spark",
    "download_flink",
    "download_hadoop",
]

_default_service: Optional[DownloadService] = None

def get_download_service(settings: Optional[Settings] = None, progress_manager: Optional[ProgressManager] = None) -> DownloadService:
    settings = settings or load_settings()
    cache = LocalCache(settings.cache_root)
    runner = ShellRunner(timeout=settings.command_timeout, log_interval=settings.log_interval)
    resolver = MirrorResolver(settings.mirror_endpoint, timeout=settings.http_timeout)
    fetcher = ArchiveFetcher(cache, runner, resolver, settings.archive_url)
    return DownloadService(cache, fetcher, runner, settings.maven_repository, progress_manager)

def _service() -> DownloadService:
    global _default_service
    if _default_service is None:
        _default_service = get_download_service()
    return _default_service

def download_spark(spark_version: str, hadoop_version: str) -> Path:
    return _service().download_spark(spark_version, hadoop_version)

def download_flink(flink_version: str, scala_version: str) -> Path:
    return _service().download_flink(flink_version, scala_version)

def download_hadoop(version: str) -> Path:
    return _service().download_hadoop(version)
