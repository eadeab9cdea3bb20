import logging
from pathlib import Path
from typing import List, Tuple

from ..config import MAVEN_REPOSITORY
from ..domain.errors import DistFetchError, DownloadError
from ..domain.models import Artifact, MavenJar
from ..fetch.archive import ArchiveFetcher
from ..fetch.cache import LocalCache
from ..shell.runner import ShellRunner, run_commands
from ..ui.progress import ProgressManager
from ..utils.versions import equals_or_newer

logger = logging.getLogger(__name__)

# flink moved the sql client jar to opt/ in this release
SQL_CLIENT_LIB_VERSION = "1.16.0"
HIVE_VERSION = "2.3.7"
HADOOP_CLIENT_VERSION = "3.3.6"


def spark_artifact(spark_version: str, hadoop_version: str) -> Artifact:
    suffix = f"-bin-hadoop{hadoop_version}.tgz"
    return Artifact(
        project="spark",
        version=spark_version,
        suffix=suffix,
        install_name=f"spark-{spark_version}-bin-hadoop{hadoop_version}",
    )

def flink_artifact(flink_version: str, scala_version: str) -> Artifact:
    return Artifact(project="flink", version=flink_version, suffix=f"-bin-scala_{scala_version}.tgz")

def hadoop_artifact(version: str) -> Artifact:
    return Artifact(project="hadoop", version=version, suffix=".tar.gz", remote_path="hadoop/core")

def flink_extra_jars(flink_version: str, scala_version: str) -> List[MavenJar]:
    """jars needed to run flink with yarn and hive, in download order."""
    return [
        MavenJar(group="org.apache.flink", name=f"flink-connector-hive_{scala_version}", version=flink_version),
        MavenJar(group="org.apache.flink", name=f"flink-hadoop-compatibility_{scala_version}", version=flink_version),
        MavenJar(group="org.apache.hive", name="hive-exec", version=HIVE_VERSION),
        MavenJar(group="org.apache.hadoop", name="hadoop-client-api", version=HADOOP_CLIENT_VERSION),
        MavenJar(group="org.apache.hadoop", name="hadoop-client-runtime", version=HADOOP_CLIENT_VERSION),
        MavenJar(group="org.apache.flink", name=f"flink-table-api-scala_{scala_version}", version=flink_version),
        MavenJar(group="org.apache.flink", name=f"flink-table-api-scala-bridge_{scala_version}", version=flink_version),
    ]

def flink_relocations(flink_home: Path, flink_version: str, scala_version: str) -> List[Tuple[Path, Path]]:
    """(source file, target directory) moves between lib/ and opt/."""
    lib = flink_home / "lib"
    opt = flink_home / "opt"
    moves = [
        (opt / f"flink-table-planner_{scala_version}-{flink_version}.jar", lib),
        (lib / f"flink-table-planner-loader-{flink_version}.jar", opt),
    ]
    if equals_or_newer(flink_version, SQL_CLIENT_LIB_VERSION):
        moves.append((opt / f"flink-sql-client-{flink_version}.jar", lib))
    return moves


class DownloadService:
    """downloads spark, flink and hadoop distributions for integration tests."""

    def __init__(
        self,
        cache: LocalCache,
        fetcher: ArchiveFetcher,
        runner: ShellRunner,
        maven_repository: str = MAVEN_REPOSITORY,
        progress_manager: ProgressManager = None,
    ):
        self.cache = cache
        self.fetcher = fetcher
        self.runner = runner
        self.maven_repository = maven_repository
        self.progress_manager = progress_manager or ProgressManager()

    def download_spark(self, spark_version: str, hadoop_version: str) -> Path:
        """return SPARK_HOME for the given spark/hadoop build, downloading it if needed."""
        artifact = spark_artifact(spark_version, hadoop_version)
        spark_home = self.cache.install_path(artifact)
        if self.cache.has_install(artifact):
            logger.info("Skip to download spark as it is already downloaded.")
            return spark_home
        self._fetch(artifact)
        return spark_home

    def download_flink(self, flink_version: str, scala_version: str) -> Path:
        """
        return FLINK_HOME for the given flink version, downloading it if needed.

        a fresh download also pulls the hive/hadoop jars into lib/ and moves
        the table planner (and from 1.16.0 the sql client) into place.
        """
        artifact = flink_artifact(flink_version, scala_version)
        flink_home = self.cache.install_path(artifact)
        if self.cache.has_install(artifact):
            logger.info("Skip to download flink as it is already downloaded.")
            return flink_home
        self._fetch(artifact)

        # download other dependencies for running flink with yarn and hive
        try:
            self._install_flink_extras(flink_home, flink_version, scala_version)
        except DistFetchError as e:
            raise DownloadError("flink", flink_version, "Fail to download jar") from e
        return flink_home

    def download_hadoop(self, version: str) -> Path:
        """return HADOOP_HOME for the given hadoop version, downloading it if needed."""
        artifact = hadoop_artifact(version)
        hadoop_home = self.cache.install_path(artifact)
        if self.cache.has_install(artifact):
            logger.info("Skip to download hadoop as it is already downloaded.")
            return hadoop_home
        self._fetch(artifact)
        return hadoop_home

    def _fetch(self, artifact: Artifact) -> Path:
        with self.progress_manager.spinner(f"downloading {artifact.project} {artifact.version}"):
            return self.fetcher.fetch(artifact)

    def _install_flink_extras(self, flink_home: Path, flink_version: str, scala_version: str):
        lib = flink_home / "lib"
        run_commands(self.runner, [
            ["wget", jar.url(self.maven_repository), "-P", str(lib)]
            for jar in flink_extra_jars(flink_version, scala_version)
        ])
        # moves run after the jar downloads
        run_commands(self.runner, [
            ["mv", str(source), str(target)]
            for source, target in flink_relocations(flink_home, flink_version, scala_version)
        ])
