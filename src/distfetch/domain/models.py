from pydantic import BaseModel, ConfigDict
from typing import Optional

from ..utils.urls import join_url

class Artifact(BaseModel):
    """identity of a distribution archive on the apache mirrors."""
    model_config = ConfigDict(frozen=True)

    project: str
    version: str
    suffix: str
    remote_path: Optional[str] = None  # defaults to the project name
    install_name: Optional[str] = None  # directory the archive extracts to

    @property
    def base_name(self) -> str:
        return f"{self.project}-{self.version}"

    @property
    def file_name(self) -> str:
        return f"{self.base_name}{self.suffix}"

    @property
    def path_segment(self) -> str:
        return self.remote_path or self.project

    @property
    def install_dir_name(self) -> str:
        return self.install_name or self.base_name

    @property
    def relative_url(self) -> str:
        return join_url(self.path_segment, self.base_name, self.file_name)

class MavenJar(BaseModel):
    """a jar pinned to exact maven coordinates."""
    model_config = ConfigDict(frozen=True)

    group: str
    name: str
    version: str

    @property
    def file_name(self) -> str:
        return f"{self.name}-{self.version}.jar"

    def url(self, repository: str) -> str:
        return join_url(repository, self.group.replace(".", "/"), self.name, self.version, self.file_name)
