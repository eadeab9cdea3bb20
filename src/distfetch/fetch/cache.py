from pathlib import Path
import shutil
from typing import List

from ..domain.errors import CacheError
from ..domain.models import Artifact

class LocalCache:
    """
    flat cache of extracted distributions: <root>/<project>/<install dir>.

    directories are created lazily on first use. the existence of an install
    directory is the only signal that a download already happened.
    """
    def __init__(self, cache_dir: Path):
        self.cache_dir = cache_dir

    def project_dir(self, project: str) -> Path:
        path = self.cache_dir / project
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheError(f"Fail to create download folder: {path}") from e
        return path.absolute()

    def install_path(self, artifact: Artifact) -> Path:
        return (self.cache_dir / artifact.project / artifact.install_dir_name).absolute()

    def has_install(self, artifact: Artifact) -> bool:
        return self.install_path(artifact).exists()

    def installs(self, project: str) -> List[Path]:
        """list extracted install directories for a project."""
        path = self.cache_dir / project
        if not path.is_dir():
            return []
        return sorted(p.absolute() for p in path.iterdir() if p.is_dir())

    def clear(self, project: str):
        """remove everything cached for a single project."""
        path = self.cache_dir / project
        if path.exists():
            shutil.rmtree(path)
