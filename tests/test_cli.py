"""Tests for CLI entry point - argument parsing and solution root detection."""

import pytest

from raspberry_debug_mcp.__main__ import find_solution_root, parse_args


def make_settings_file(directory):
    settings = directory / ".vs" / "raspberry-projects.json"
    settings.parent.mkdir(parents=True)
    settings.write_text("{}", encoding="utf-8")


class TestFindSolutionRoot:
    """Locating the solution whose .vs folder holds the project settings."""

    def test_solution_above_project_directory(self, tmp_path, monkeypatch):
        (tmp_path / "Blinky.sln").touch()
        project_dir = tmp_path / "Blinky.Web"
        project_dir.mkdir()
        (project_dir / "Blinky.Web.csproj").touch()
        monkeypatch.chdir(project_dir)

        assert find_solution_root(root=tmp_path) == str(tmp_path.resolve())

    def test_existing_settings_file_wins_over_nearer_solution(self, tmp_path, monkeypatch):
        """A nested .sln does not hide the solution that already has settings."""
        make_settings_file(tmp_path)
        nested = tmp_path / "samples"
        nested.mkdir()
        (nested / "Samples.sln").touch()
        monkeypatch.chdir(nested)

        assert find_solution_root(root=tmp_path) == str(tmp_path.resolve())

    def test_project_file_used_without_solution(self, tmp_path, monkeypatch):
        project_dir = tmp_path / "Sensors"
        (project_dir / "Properties").mkdir(parents=True)
        (project_dir / "Sensors.fsproj").touch()
        monkeypatch.chdir(project_dir / "Properties")

        assert find_solution_root(root=tmp_path) == str(project_dir.resolve())

    def test_git_checkout_is_not_a_solution(self, tmp_path, monkeypatch):
        (tmp_path / ".git").mkdir()
        workdir = tmp_path / "docs"
        workdir.mkdir()
        monkeypatch.chdir(workdir)

        assert find_solution_root(root=tmp_path) == str(workdir.resolve())

    def test_search_stops_at_root(self, tmp_path, monkeypatch):
        make_settings_file(tmp_path)
        inner = tmp_path / "inner"
        inner.mkdir()
        monkeypatch.chdir(inner)

        assert find_solution_root(root=inner) == str(inner.resolve())


class TestParseArgs:
    """Tests for parse_args."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("RASPBERRY_CONNECTIONS_PATH", raising=False)
        monkeypatch.delenv("RASPBERRY_SDK_CATALOG_PATH", raising=False)

        args = parse_args([])

        assert args.project is None
        assert args.project_from_cwd is False
        assert args.connections is None
        assert args.catalog is None

    def test_environment_fallbacks(self, monkeypatch):
        monkeypatch.setenv("RASPBERRY_CONNECTIONS_PATH", "/data/connections.json")
        monkeypatch.setenv("RASPBERRY_SDK_CATALOG_PATH", "/data/sdk-catalog.json")

        args = parse_args([])

        assert args.connections == "/data/connections.json"
        assert args.catalog == "/data/sdk-catalog.json"

    def test_explicit_options(self):
        args = parse_args(["--project", "/src/app", "--catalog", "c.json", "--connections", "k.json"])

        assert args.project == "/src/app"
        assert args.catalog == "c.json"
        assert args.connections == "k.json"

    def test_help_names_settings_file(self, capsys):
        with pytest.raises(SystemExit):
            parse_args(["--help"])

        assert "raspberry-projects.json" in capsys.readouterr().out
