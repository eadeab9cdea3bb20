"""test suite for DownloadService."""
import pytest
import sys
from pathlib import Path
from unittest.mock import Mock

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import distfetch
from distfetch.config import Settings
from distfetch.domain.errors import DownloadError, InvalidVersionError, MirrorResolutionError, ShellCommandError
from distfetch.fetch.archive import ArchiveFetcher
from distfetch.fetch.cache import LocalCache
from distfetch.fetch.mirror import MirrorResolver
from distfetch.services.download import (
    DownloadService,
    flink_extra_jars,
    flink_relocations,
    hadoop_artifact,
    spark_artifact,
)
from distfetch.shell.runner import ShellRunner
from distfetch.ui.progress import ProgressManager

MAVEN = "https://repo1.maven.org/maven2"


class TestDownloadService:
    @pytest.fixture
    def cache(self, tmp_path):
        return LocalCache(tmp_path / "cache")

    @pytest.fixture
    def runner(self):
        return Mock(spec=ShellRunner)

    @pytest.fixture
    def fetcher(self, cache):
        fetcher = Mock(spec=ArchiveFetcher)
        fetcher.fetch.side_effect = lambda artifact: cache.install_path(artifact)
        return fetcher

    @pytest.fixture
    def service(self, cache, fetcher, runner):
        progress = ProgressManager(console=Mock())
        progress._enabled = False
        return DownloadService(cache, fetcher, runner, MAVEN, progress)

    @pytest.mark.parametrize("download, args, install", [
        ("download_spark", ("3.4.1", "3"), "spark/spark-3.4.1-bin-hadoop3"),
        ("download_flink", ("1.16.0", "2.12"), "flink/flink-1.16.0"),
        ("download_hadoop", ("3.3.6",), "hadoop/hadoop-3.3.6"),
    ])
    def test_existing_install_is_skipped(self, service, cache, fetcher, runner, download, args, install):
        existing = cache.cache_dir / install
        existing.mkdir(parents=True)

        result = getattr(service, download)(*args)

        assert result == existing.absolute()
        fetcher.fetch.assert_not_called()
        runner.run.assert_not_called()

    def test_download_spark(self, service, cache, fetcher, runner):
        result = service.download_spark("3.4.1", "3")

        artifact = fetcher.fetch.call_args.args[0]
        assert artifact == spark_artifact("3.4.1", "3")
        assert artifact.file_name == "spark-3.4.1-bin-hadoop3.tgz"
        assert result == (cache.cache_dir / "spark" / "spark-3.4.1-bin-hadoop3").absolute()
        runner.run.assert_not_called()

    def test_download_hadoop(self, service, cache, fetcher):
        result = service.download_hadoop("3.3.6")

        artifact = fetcher.fetch.call_args.args[0]
        assert artifact == hadoop_artifact("3.3.6")
        assert artifact.relative_url == "hadoop/core/hadoop-3.3.6/hadoop-3.3.6.tar.gz"
        assert result == (cache.cache_dir / "hadoop" / "hadoop-3.3.6").absolute()

    def test_download_flink_extras(self, service, cache, runner):
        home = service.download_flink("1.16.0", "2.12")

        commands = [c.args[0] for c in runner.run.call_args_list]
        wgets = [c for c in commands if c[0] == "wget"]
        moves = [c for c in commands if c[0] == "mv"]

        assert home == (cache.cache_dir / "flink" / "flink-1.16.0").absolute()
        assert commands == wgets + moves
        assert all(c[2:] == ["-P", str(home / "lib")] for c in wgets)
        assert [c[1] for c in wgets] == [jar.url(MAVEN) for jar in flink_extra_jars("1.16.0", "2.12")]
        assert moves == [
            ["mv", str(home / "opt" / "flink-table-planner_2.12-1.16.0.jar"), str(home / "lib")],
            ["mv", str(home / "lib" / "flink-table-planner-loader-1.16.0.jar"), str(home / "opt")],
            ["mv", str(home / "opt" / "flink-sql-client-1.16.0.jar"), str(home / "lib")],
        ]

    def test_download_old_flink_keeps_sql_client(self, service, runner):
        service.download_flink("1.15.4", "2.12")

        moves = [c.args[0] for c in runner.run.call_args_list if c.args[0][0] == "mv"]
        assert len(moves) == 2
        assert not any("flink-sql-client" in m[1] for m in moves)

    def test_flink_extra_failure_is_fatal(self, service, runner):
        runner.run.side_effect = [None, None, ShellCommandError(["wget"], returncode=8)]

        with pytest.raises(DownloadError) as exc_info:
            service.download_flink("1.16.0", "2.12")

        assert exc_info.value.project == "flink"
        assert isinstance(exc_info.value.__cause__, ShellCommandError)
        # nothing after the failed download runs
        assert runner.run.call_count == 3

    def test_unparseable_version_fails_after_jar_downloads(self, service, runner):
        with pytest.raises(DownloadError) as exc_info:
            service.download_flink("nightly", "2.12")

        assert isinstance(exc_info.value.__cause__, InvalidVersionError)
        commands = [c.args[0] for c in runner.run.call_args_list]
        # every jar download ran, no move did
        assert [c[0] for c in commands] == ["wget"] * 7

    def test_base_download_failure_propagates(self, service, fetcher, runner):
        fetcher.fetch.side_effect = DownloadError("flink", "1.16.0")

        with pytest.raises(DownloadError):
            service.download_flink("1.16.0", "2.12")
        runner.run.assert_not_called()


class TestFlinkLayout:
    def test_extra_jars(self):
        jars = flink_extra_jars("1.16.0", "2.12")
        assert [jar.file_name for jar in jars] == [
            "flink-connector-hive_2.12-1.16.0.jar",
            "flink-hadoop-compatibility_2.12-1.16.0.jar",
            "hive-exec-2.3.7.jar",
            "hadoop-client-api-3.3.6.jar",
            "hadoop-client-runtime-3.3.6.jar",
            "flink-table-api-scala_2.12-1.16.0.jar",
            "flink-table-api-scala-bridge_2.12-1.16.0.jar",
        ]

    def test_sql_client_moves_from_threshold(self):
        home = Path("/flink")
        assert len(flink_relocations(home, "1.15.9", "2.12")) == 2
        assert len(flink_relocations(home, "1.16.0", "2.12")) == 3
        assert len(flink_relocations(home, "2.0.0", "2.12")) == 3


class TestFreshFlinkCache:
    """drives the real fetcher with recorded shell commands."""

    def test_full_command_sequence(self, tmp_path):
        cache = LocalCache(tmp_path / "cache")
        runner = Mock(spec=ShellRunner)
        resolver = Mock(spec=MirrorResolver)
        resolver.preferred_mirror.return_value = "https://dlcdn.apache.org"
        fetcher = ArchiveFetcher(cache, runner, resolver)
        progress = ProgressManager(console=Mock())
        progress._enabled = False
        service = DownloadService(cache, fetcher, runner, MAVEN, progress)

        home = service.download_flink("1.16.0", "2.12")

        commands = [c.args[0] for c in runner.run.call_args_list]
        flink_dir = cache.cache_dir.absolute() / "flink"
        assert commands[0] == [
            "wget",
            "https://dlcdn.apache.org/flink/flink-1.16.0/flink-1.16.0-bin-scala_2.12.tgz",
            "-P",
            str(flink_dir),
        ]
        assert commands[1] == ["tar", "-xvf", str(flink_dir / "flink-1.16.0-bin-scala_2.12.tgz"), "-C", str(flink_dir)]
        assert [c[0] for c in commands[2:]] == ["wget"] * 7 + ["mv"] * 3
        assert commands[-1] == ["mv", str(home / "opt" / "flink-sql-client-1.16.0.jar"), str(home / "lib")]

    def test_unreachable_mirror_uses_archive(self, tmp_path):
        cache = LocalCache(tmp_path / "cache")
        runner = Mock(spec=ShellRunner)
        resolver = Mock(spec=MirrorResolver)
        resolver.preferred_mirror.side_effect = MirrorResolutionError("offline")
        fetcher = ArchiveFetcher(cache, runner, resolver)
        progress = ProgressManager(console=Mock())
        progress._enabled = False
        service = DownloadService(cache, fetcher, runner, MAVEN, progress)

        service.download_hadoop("3.3.6")

        wget = runner.run.call_args_list[0].args[0]
        assert wget[1] == "https://archive.apache.org/dist/hadoop/core/hadoop-3.3.6/hadoop-3.3.6.tar.gz"


class TestDefaultService:
    def test_get_download_service_is_lazy(self, tmp_path):
        settings = Settings(cache_root=tmp_path / "cache", archive_url="https://archive.example.org/dist")

        service = distfetch.get_download_service(settings)

        assert isinstance(service, DownloadService)
        assert service.fetcher.archive_url == "https://archive.example.org/dist"
        assert not (tmp_path / "cache").exists()

    def test_module_level_download(self, tmp_path, monkeypatch):
        existing = tmp_path / "cache" / "hadoop" / "hadoop-3.3.6"
        existing.mkdir(parents=True)
        service = distfetch.get_download_service(Settings(cache_root=tmp_path / "cache"))
        monkeypatch.setattr(distfetch, "_default_service", service)

        assert distfetch.download_hadoop("3.3.6") == existing.absolute()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
