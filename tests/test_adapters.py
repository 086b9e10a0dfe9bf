"""
Tests for adapters — hook parsing, shell execution, docker and git argv.
"""

from pathlib import Path

import pytest

from docat.adapters.containers.docker import DockerComposeAdapter, compose_file_args
from docat.adapters.mock import MockContainerDriver, MockShellAdapter, MockVcsDriver
from docat.adapters.registry import Drivers
from docat.adapters.shell.command import ShellCommandAdapter, default_substitutions, parse_command
from docat.adapters.vcs.git import GitAdapter
from docat.core.errors import CommandError


class TestParseCommand:
    def test_words(self):
        assert parse_command("make build", {}) == ["make", "build"]

    def test_quoting(self):
        assert parse_command('echo "a b" c', {}) == ["echo", "a b", "c"]

    def test_substitution_in_arguments(self):
        table = {"$HOME": "/home/test"}
        assert parse_command("cp $HOME/.env .", table) == ["cp", "/home/test/.env", "."]

    def test_program_not_substituted(self):
        table = {"$HOME": "/home/test"}
        assert parse_command("$HOME/bin/tool $HOME", table) == ["$HOME/bin/tool", "/home/test"]

    def test_whole_variable_names_only(self):
        table = {"$HOME": "/home/test", "${HOME}": "/home/test"}
        assert parse_command("ls $HOMEDIR $HOME_X $HOME1 $HOME-x", table) == [
            "ls",
            "$HOMEDIR",
            "$HOME_X",
            "$HOME1",
            "/home/test-x",
        ]
        assert parse_command("ls ${HOME}dir", table) == ["ls", "/home/testdir"]

    def test_replacement_taken_literally(self):
        assert parse_command(r"ls $HOME", {"$HOME": r"C:\new\1"}) == ["ls", r"C:\new\1"]

    def test_no_general_expansion(self):
        assert parse_command("echo $USER", {"$HOME": "/h"}) == ["echo", "$USER"]

    def test_default_table(self):
        home = str(Path.home())
        assert default_substitutions() == {"${HOME}": home, "$HOME": home}
        assert parse_command("ls ${HOME}") == ["ls", home]

    @pytest.mark.parametrize("command", ["", "   "])
    def test_blank(self, command):
        assert parse_command(command, {}) == []

    def test_unbalanced_quote(self):
        with pytest.raises(CommandError, match="Cannot parse"):
            parse_command('echo "oops', {})


class TestShellCommandAdapter:
    def test_is_available(self):
        assert ShellCommandAdapter().is_available()

    def test_capture(self, tmp_path: Path):
        result = ShellCommandAdapter().run(["echo", "hello world"], cwd=tmp_path, capture=True)
        assert result.ok
        assert result.stdout.strip() == "hello world"
        assert result.cwd == str(tmp_path)

    def test_failure_raises(self, tmp_path: Path):
        with pytest.raises(CommandError) as exc_info:
            ShellCommandAdapter().run(["false"], cwd=tmp_path)
        assert exc_info.value.return_code == 1
        assert exc_info.value.command == ["false"]

    def test_failure_unchecked(self, tmp_path: Path):
        result = ShellCommandAdapter().run(["false"], cwd=tmp_path, check=False)
        assert result.failed

    def test_missing_program(self, tmp_path: Path):
        with pytest.raises(CommandError, match="Could not run"):
            ShellCommandAdapter().run(["docat-no-such-program"], cwd=tmp_path)

    def test_hooks_stop_at_first_failure(self, tmp_path: Path):
        shell = MockShellAdapter()
        shell.fail_program("make")
        with pytest.raises(CommandError):
            shell.run_hooks(["echo one", "", "make broken", "echo two"], tmp_path)
        assert shell.commands == [["echo", "one"], ["make", "broken"]]

    def test_hooks_run_in_cwd(self, tmp_path: Path):
        shell = MockShellAdapter(substitutions={"$HOME": "/home/test"})
        results = shell.run_hooks(["touch $HOME/marker"], tmp_path)
        assert len(results) == 1
        assert shell.calls("run") == [{"args": ["touch", "/home/test/marker"], "cwd": tmp_path}]


class TestDockerComposeAdapter:
    @pytest.fixture
    def shell(self) -> MockShellAdapter:
        return MockShellAdapter()

    @pytest.fixture
    def docker(self, shell: MockShellAdapter) -> DockerComposeAdapter:
        return DockerComposeAdapter(shell)

    def test_compose_file_args(self):
        assert compose_file_args([]) == []
        assert compose_file_args(["a.yml", "b.yml"]) == ["-f", "a.yml", "-f", "b.yml"]

    def test_up(self, docker: DockerComposeAdapter, shell: MockShellAdapter, tmp_path: Path):
        docker.compose_up(["a.yml", "b.yml"], [], tmp_path)
        assert shell.commands == [["docker", "compose", "-f", "a.yml", "-f", "b.yml", "up", "-d"]]
        assert shell.calls("run")[0]["cwd"] == tmp_path

    def test_up_services(self, docker: DockerComposeAdapter, shell: MockShellAdapter, tmp_path: Path):
        docker.compose_up([], ["web"], tmp_path)
        assert shell.commands == [["docker", "compose", "up", "-d", "web"]]

    def test_down(self, docker: DockerComposeAdapter, shell: MockShellAdapter, tmp_path: Path):
        docker.compose_down(["a.yml"], tmp_path)
        assert shell.commands == [["docker", "compose", "-f", "a.yml", "down"]]

    def test_exec_and_run(self, docker: DockerComposeAdapter, shell: MockShellAdapter, tmp_path: Path):
        docker.compose_exec("web", [], ["sh", "-c", "ls"], tmp_path)
        docker.compose_run("web", [], ["pytest"], tmp_path)
        assert shell.commands == [
            ["docker", "compose", "exec", "-T", "web", "sh", "-c", "ls"],
            ["docker", "compose", "run", "--rm", "--no-deps", "web", "pytest"],
        ]

    def test_queries(self, docker: DockerComposeAdapter, shell: MockShellAdapter, tmp_path: Path):
        assert docker.compose_list_services([], tmp_path) == ""
        assert docker.compose_config_services([], tmp_path) == ""
        assert shell.commands == [
            ["docker", "compose", "ps", "--format", "json"],
            ["docker", "compose", "config", "--services"],
        ]

    def test_query_failure_is_empty(self, docker: DockerComposeAdapter, shell: MockShellAdapter, tmp_path: Path):
        shell.fail_program("docker")
        assert docker.compose_list_services([], tmp_path) == ""

    def test_existing_network_tolerated(self, docker: DockerComposeAdapter, shell: MockShellAdapter):
        shell.fail_program("docker")
        assert docker.create_network("myapp").failed
        assert docker.create_volume("data").failed
        assert shell.commands == [
            ["docker", "network", "create", "myapp"],
            ["docker", "volume", "create", "data"],
        ]

    def test_compose_failure_raises(self, docker: DockerComposeAdapter, shell: MockShellAdapter, tmp_path: Path):
        shell.fail_program("docker")
        with pytest.raises(CommandError):
            docker.compose_up([], [], tmp_path)


class TestGitAdapter:
    def test_clone(self, tmp_path: Path):
        shell = MockShellAdapter()
        target = tmp_path / "work" / "api"
        GitAdapter(shell).clone("git@example.com:me/api.git", target)
        assert target.parent.is_dir()
        assert shell.commands == [["git", "clone", "git@example.com:me/api.git", str(target)]]
        assert shell.calls("run")[0]["cwd"] == target.parent

    def test_config_value_unset(self, tmp_path: Path):
        shell = MockShellAdapter()
        shell.fail_program("git")
        assert GitAdapter(shell).get_config_value("remote.origin.url", tmp_path) == ""
        assert shell.commands == [["git", "config", "--get", "remote.origin.url"]]

    def test_config_value_missing_binary(self, tmp_path: Path):
        git = GitAdapter(binary="docat-no-such-git")
        assert not git.is_available()
        assert git.get_config_value("remote.origin.url", tmp_path) == ""


class TestDrivers:
    def test_default(self):
        drivers = Drivers.default()
        assert isinstance(drivers.containers, DockerComposeAdapter)
        assert isinstance(drivers.vcs, GitAdapter)
        assert drivers.containers.name == "docker"
        assert drivers.vcs.name == "git"

    def test_status(self):
        drivers = Drivers(MockContainerDriver(available=False), MockVcsDriver(), MockShellAdapter())
        assert drivers.status() == {"mock-docker": False, "mock-git": True, "mock-shell": True}

    def test_warn_unavailable(self, caplog: pytest.LogCaptureFixture):
        drivers = Drivers(MockContainerDriver(available=False), MockVcsDriver(), MockShellAdapter())
        with caplog.at_level("WARNING"):
            drivers.warn_unavailable()
        assert "mock-docker is not installed" in caplog.text

    def test_repr(self):
        assert repr(MockVcsDriver()) == "<MockVcsDriver name='mock-git'>"
