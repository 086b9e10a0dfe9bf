"""
Tests for project selection — name matching, install inclusion, cwd narrowing.
"""

from pathlib import Path

import pytest

from docat.core.errors import SelectionError
from docat.core.models import App
from docat.core.services.selection import (
    filter_projects,
    find_project,
    projects_in_dir,
    select_projects,
)


class TestFilterProjects:
    def test_no_names_selects_everything(self, app: App):
        assert list(filter_projects(app, [])) == ["api", "root", "web"]
        assert list(filter_projects(app, [], include_install=False)) == ["api", "root", "web"]

    def test_by_dir_name(self, app: App):
        assert list(filter_projects(app, ["web"])) == ["web"]

    def test_by_display_name(self, app: App):
        assert list(filter_projects(app, ["backend"])) == ["api"]

    def test_adds_install_project(self, app: App):
        assert list(filter_projects(app, ["web"], include_install=True)) == ["root", "web"]

    def test_install_named_explicitly(self, app: App):
        assert list(filter_projects(app, ["root"], include_install=True)) == ["root"]

    def test_unknown_names_skipped(self, app: App, caplog: pytest.LogCaptureFixture):
        with caplog.at_level("WARNING"):
            selected = filter_projects(app, ["nope", "web"])
        assert list(selected) == ["web"]
        assert "Unknown project 'nope'" in caplog.text

    def test_duplicate_names(self, app: App, caplog: pytest.LogCaptureFixture):
        with caplog.at_level("WARNING"):
            selected = filter_projects(app, ["api", "backend", "api"])
        assert list(selected) == ["api"]
        assert "Unknown project" not in caplog.text

    def test_sorted_by_key(self, app: App):
        assert list(filter_projects(app, ["web", "api"])) == ["api", "web"]

    def test_subset_of_app(self, app: App):
        for names in (["api"], ["web", "nope"], ["backend", "root"]):
            selected = filter_projects(app, names, include_install=True)
            assert set(selected) <= set(app.projects)


class TestSelectProjects:
    def test_all_flag(self, app: App):
        assert list(select_projects(app, [], all_=True)) == ["api", "root", "web"]

    def test_all_with_names(self, app: App):
        with pytest.raises(SelectionError, match="not compatible"):
            select_projects(app, ["api"], all_=True)

    def test_names(self, app: App):
        assert list(select_projects(app, ["api"], include_install=True)) == ["api", "root"]

    def test_cwd_in_checkout_narrows(self, app: App, shared_dir: Path):
        selected = select_projects(app, [], include_install=True, cwd=shared_dir / "web")
        assert list(selected) == ["web"]

    def test_cwd_elsewhere_selects_all(self, app: App, tmp_path: Path):
        assert list(select_projects(app, [], cwd=tmp_path)) == ["api", "root", "web"]

    def test_names_ignore_cwd(self, app: App, shared_dir: Path):
        assert list(select_projects(app, ["api"], cwd=shared_dir / "web")) == ["api"]


class TestFindProject:
    def test_explicit(self, app: App):
        assert find_project(app, "backend").dir_name == "api"

    def test_explicit_unknown(self, app: App, shared_dir: Path):
        with pytest.raises(SelectionError, match="--project"):
            find_project(app, "nope", shared_dir / "web")

    def test_from_cwd(self, app: App, shared_dir: Path):
        assert find_project(app, None, shared_dir / "web").dir_name == "web"

    def test_nothing_to_go_on(self, app: App, tmp_path: Path):
        with pytest.raises(SelectionError, match="Could not determine project"):
            find_project(app, None, tmp_path)

    def test_projects_in_dir(self, app: App, install_dir: Path):
        assert [p.dir_name for p in projects_in_dir(app, install_dir)] == ["root"]
