"""
Tests for init — generating docat.yml and registering the checkout.
"""

from pathlib import Path

import pytest

from docat.adapters.mock import MockVcsDriver
from docat.core.config.loader import load_file
from docat.core.models import Config
from docat.core.persistence.cache_store import MemoryCacheStore
from docat.core.use_cases.init import REMOTE_URL_KEY, build_project_config, default_remote, init_project


def _yes(_prompt: str) -> bool:
    return True


@pytest.fixture
def checkout(shared_dir: Path) -> Path:
    path = shared_dir / "api"
    path.mkdir()
    return path


class TestBuildProjectConfig:
    def test_uses_origin(self, checkout: Path, vcs: MockVcsDriver):
        vcs.config_values[REMOTE_URL_KEY] = "git@example.com:me/api.git"
        config = build_project_config("myapp", checkout, vcs)
        app = config.apps["myapp"]
        assert app.config.shared_network == "myapp"
        assert app.projects["api"].git == "git@example.com:me/api.git"
        assert vcs.calls("get_config_value") == [{"key": REMOTE_URL_KEY, "directory": checkout}]

    def test_placeholder_remote(self, checkout: Path, vcs: MockVcsDriver):
        config = build_project_config("myapp", checkout, vcs)
        assert config.apps["myapp"].projects["api"].git == default_remote("api")
        assert default_remote("api") == "https://git@github.com:name/api.git"


class TestInitProject:
    def test_first_project_becomes_install_root(self, checkout: Path, store: MemoryCacheStore, vcs: MockVcsDriver):
        vcs.config_values[REMOTE_URL_KEY] = "git@example.com:me/api.git"

        result = init_project("myapp", store, vcs, checkout, _yes)

        assert result.status == "created"
        assert result.config_path == checkout / "docat.yml"
        assert load_file(result.config_path) == result.project_config
        assert "shared_network: myapp" in result.project_yaml

        app = store.load().apps["myapp"]
        assert app.config.install_dir == checkout
        assert app.config.shared_dir == checkout.parent
        assert app.projects["api"].dir == checkout
        assert app.projects["api"].is_install is True

    def test_existing_file_skipped(self, checkout: Path, store: MemoryCacheStore, vcs: MockVcsDriver, write_yaml):
        write_yaml(checkout, "myapp: {}\n")
        result = init_project("myapp", store, vcs, checkout, _yes)
        assert result.status == "exists"
        assert not store.exists()
        assert vcs.call_count == 0

    def test_aborted(self, checkout: Path, store: MemoryCacheStore, vcs: MockVcsDriver):
        prompts = []

        def _no(prompt: str) -> bool:
            prompts.append(prompt)
            return False

        result = init_project("myapp", store, vcs, checkout, _no)

        assert result.status == "aborted"
        assert prompts == ["Confirm generating docat.yml?"]
        assert not (checkout / "docat.yml").exists()
        assert not store.exists()

    def test_joins_existing_app(self, app, shared_dir: Path, store: MemoryCacheStore, vcs: MockVcsDriver):
        store.save(Config(apps={"myapp": app}))
        worker = shared_dir / "worker"
        worker.mkdir()

        init_project("myapp", store, vcs, worker, _yes)

        cached = store.load().apps["myapp"]
        assert cached.projects["worker"].dir == worker
        assert cached.projects["worker"].is_install is False
        assert cached.install_project.dir_name == "root"
        assert cached.config.shared_network == "myapp"
