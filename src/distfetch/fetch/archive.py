import logging
from pathlib import Path

from ..config import ARCHIVE_URL
from ..domain.errors import DistFetchError, DownloadError
from ..domain.models import Artifact
from ..shell.runner import ShellRunner
from ..utils.urls import join_url
from .cache import LocalCache
from .mirror import MirrorResolver

logger = logging.getLogger(__name__)

class ArchiveFetcher:
    """downloads and extracts a distribution archive, mirror first then apache archive."""

    def __init__(
        self,
        cache: LocalCache,
        runner: ShellRunner,
        mirror_resolver: MirrorResolver,
        archive_url: str = ARCHIVE_URL,
    ):
        self.cache = cache
        self.runner = runner
        self.mirror_resolver = mirror_resolver
        self.archive_url = archive_url

    def fetch(self, artifact: Artifact) -> Path:
        """
        download and extract an artifact into its project directory.

        args:
            artifact: the archive to fetch

        returns:
            path of the extracted install directory

        raises:
            DownloadError: if both the mirror and the archive attempts failed
        """
        project_dir = self.cache.project_dir(artifact.project)

        try:
            mirror = self.mirror_resolver.preferred_mirror()
            self._fetch_and_extract(join_url(mirror, artifact.relative_url), artifact, project_dir)
        except (DistFetchError, OSError) as e:
            logger.warning(
                f"Failed to download {artifact.project} from mirror site, fallback to use apache archive: {e}"
            )
            try:
                self._fetch_and_extract(join_url(self.archive_url, artifact.relative_url), artifact, project_dir)
            except (DistFetchError, OSError) as ex:
                raise DownloadError(artifact.project, artifact.version) from ex

        return project_dir / artifact.install_dir_name

    def download(self, project: str, version: str, suffix: str, remote_path: str = None) -> Path:
        return self.fetch(Artifact(project=project, version=version, suffix=suffix, remote_path=remote_path))

    def _fetch_and_extract(self, url: str, artifact: Artifact, project_dir: Path):
        archive = project_dir / artifact.file_name
        # wget -P appends .1 to an existing file name, so drop leftovers first
        if archive.exists():
            archive.unlink()
        self.runner.run(["wget", url, "-P", str(project_dir)])
        # tar detects the compression itself
        self.runner.run(["tar", "-xvf", str(archive), "-C", str(project_dir)])
