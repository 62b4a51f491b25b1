"""Tests for the flakegen command line.

parse_args is tested directly; main() is exercised end to end with stdout
and stderr captured. Logfire is patched out so no test configures it.
"""

from unittest.mock import patch

import pytest

from flakegen import __version__
from flakegen.cli import CliArgs, build_descriptor, main, parse_args
from flakegen.config import FlakegenSettings, clear_settings_cache
from flakegen.errors import (
    ConfigError,
    FlagParseError,
    TemplateExecError,
    TemplateParseError,
    UsageError,
)
from flakegen.nix_gen.host import nix_system


@pytest.fixture(autouse=True)
def _isolate(monkeypatch, tmp_path):
    for var in ("FLAKEGEN_NIXPKGS_URL", "FLAKEGEN_SYSTEM", "FLAKEGEN_LOG_LEVEL", "LOGFIRE_TOKEN"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    with patch("flakegen.cli.logfire"):
        yield
    clear_settings_cache()


class TestParseArgs:
    """parse_args takes name and language verbatim, then parses flags."""

    def test_positionals_only(self):
        args = parse_args(["myapp", "go"])
        assert args == CliArgs(name="myapp", language="go", packages=[], description="Dev Shell Flake")

    def test_packages_flag(self):
        assert parse_args(["myapp", "python", "-p", "a,b"]).packages == ["a", "b"]

    def test_packages_long_flag(self):
        assert parse_args(["myapp", "python", "--packages", "jq"]).packages == ["jq"]

    def test_packages_equals_syntax(self):
        assert parse_args(["myapp", "python", "-p=jq,fd"]).packages == ["jq", "fd"]

    def test_trailing_comma_kept(self):
        assert parse_args(["myapp", "go", "-p", "jq,"]).packages == ["jq", ""]

    def test_empty_packages_flag(self):
        assert parse_args(["myapp", "go", "-p", ""]).packages == []

    def test_description_default(self):
        assert parse_args(["myapp", "go"]).description == "Dev Shell Flake"

    def test_description_flag(self):
        assert parse_args(["myapp", "go", "-d", "My Shell"]).description == "My Shell"

    def test_empty_description_uses_default(self):
        assert parse_args(["myapp", "go", "-d", ""]).description == "Dev Shell Flake"

    def test_flags_in_any_order(self):
        args = parse_args(["myapp", "rust", "-d", "Tools", "-p", "just"])
        assert args.packages == ["just"]
        assert args.description == "Tools"

    def test_first_two_arguments_never_flags(self):
        """A leading flag-like argument is taken as the project name."""
        args = parse_args(["-p", "go"])
        assert args.name == "-p"
        assert args.language == "go"

    def test_language_not_normalized(self):
        assert parse_args(["myapp", "Go"]).language == "Go"

    def test_extra_positionals_ignored(self, caplog):
        args = parse_args(["myapp", "go", "stray", "-p", "jq"])
        assert args.packages == ["jq"]
        assert "stray" in caplog.text

    def test_extra_positionals_on_both_sides_of_a_flag(self, caplog):
        args = parse_args(["myapp", "go", "a", "-p", "x", "b"])
        assert args.packages == ["x"]
        assert "Ignoring unexpected arguments: a b" in caplog.text

    def test_extra_positionals_between_flags(self, caplog):
        args = parse_args(["myapp", "go", "-d", "Tools", "a", "-p", "x", "b", "c"])
        assert args.description == "Tools"
        assert args.packages == ["x"]
        assert "a b c" in caplog.text


class TestParseArgsErrors:
    """Too few arguments and malformed flags raise typed errors."""

    @pytest.mark.parametrize("argv", [[], ["myapp"]])
    def test_too_few_arguments(self, argv):
        with pytest.raises(UsageError, match="Usage: flakegen <name> <language>"):
            parse_args(argv)

    def test_unknown_flag(self):
        with pytest.raises(FlagParseError, match="unrecognized arguments: -x"):
            parse_args(["myapp", "go", "-x"])

    def test_flag_missing_value(self):
        with pytest.raises(FlagParseError, match="-p"):
            parse_args(["myapp", "go", "-p"])

    @pytest.mark.parametrize(
        "error",
        [UsageError, FlagParseError, ConfigError, TemplateParseError, TemplateExecError],
    )
    def test_every_error_exits_1(self, error):
        """One non-zero exit code for every failure kind."""
        assert error("boom").exit_code == 1

    def test_help_exits_zero(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["myapp", "go", "--help"])
        assert exc_info.value.code == 0
        assert "-p PACKAGES" in capsys.readouterr().out

    def test_help_alone_exits_zero(self):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["-h"])
        assert exc_info.value.code == 0

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestBuildDescriptor:
    """build_descriptor resolves packages and the platform."""

    def test_user_then_default_packages(self):
        args = CliArgs(name="myapp", language="python", packages=["a", "b"])
        d = build_descriptor(args, FlakegenSettings())
        assert d.packages == ["a", "b", "python3"]

    def test_platform_from_host(self):
        with patch("flakegen.cli.nix_system", return_value="aarch64-darwin"):
            d = build_descriptor(CliArgs(name="myapp", language="go"), FlakegenSettings())
        assert d.platform == "aarch64-darwin"

    def test_platform_override_from_settings(self):
        settings = FlakegenSettings(system="riscv64-linux")
        d = build_descriptor(CliArgs(name="myapp", language="go"), settings)
        assert d.platform == "riscv64-linux"

    def test_nixpkgs_url_from_settings(self):
        settings = FlakegenSettings(nixpkgs_url="github:NixOS/nixpkgs/nixos-24.05")
        d = build_descriptor(CliArgs(name="myapp", language="go"), settings)
        assert d.nixpkgs_url == "github:NixOS/nixpkgs/nixos-24.05"


class TestMain:
    """End to end: main() writes the flake to stdout and returns the exit code."""

    def test_go_project(self, capsys):
        assert main(["myapp", "go"]) == 0
        out, err = capsys.readouterr()
        assert "\n        go\n" in out
        assert f'system = "{nix_system()}";' in out
        assert "if [ ! -e go.mod ]; then" in out
        assert "go mod init myapp" in out

    def test_python_project_with_flags(self, capsys):
        assert main(["pyproj", "python", "-p", "ruff,mypy", "-d", "My Shell"]) == 0
        out = capsys.readouterr().out
        assert 'description = "My Shell";' in out
        assert "        ruff\n        mypy\n        python3\n" in out
        assert "source ./venv/bin/activate" in out

    def test_unknown_language(self, capsys):
        assert main(["app", "ruby", "-p", "ruby"]) == 0
        out = capsys.readouterr().out
        assert "        ruby\n      ];" in out
        assert "shellHook = '''';" in out

    def test_system_override(self, capsys, monkeypatch):
        monkeypatch.setenv("FLAKEGEN_SYSTEM", "aarch64-linux")
        assert main(["myapp", "go"]) == 0
        assert 'system = "aarch64-linux";' in capsys.readouterr().out

    @pytest.mark.parametrize("argv", [[], ["myapp"]])
    def test_too_few_arguments(self, capsys, argv):
        assert main(argv) == 1
        out, err = capsys.readouterr()
        assert out == ""
        assert "Usage:" in err

    def test_bad_flag(self, capsys):
        assert main(["myapp", "go", "--nope"]) == 1
        out, err = capsys.readouterr()
        assert out == ""
        assert "unrecognized arguments" in err

    def test_invalid_config(self, capsys, monkeypatch):
        monkeypatch.setenv("FLAKEGEN_SYSTEM", "not a system")
        assert main(["myapp", "go"]) == 1
        out, err = capsys.readouterr()
        assert out == ""
        assert "FLAKEGEN_SYSTEM" in err

    def test_template_failure_writes_nothing_to_stdout(self, capsys):
        with patch("flakegen.nix_gen.generator.FLAKE_TEMPLATE", "{{ homepage }}"):
            assert main(["myapp", "go"]) == 1
        out, err = capsys.readouterr()
        assert out == ""
        assert "Failed to render template" in err

    def test_reads_sys_argv(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.argv", ["flakegen", "myapp", "rust"])
        assert main() == 0
        assert "        rust-analyzer\n" in capsys.readouterr().out

    def test_logfire_configured_without_console(self):
        with patch("flakegen.cli.logfire") as mock_logfire:
            main(["myapp", "go"])
        kwargs = mock_logfire.configure.call_args.kwargs
        assert kwargs["console"] is False
        assert kwargs["send_to_logfire"] == "if-token-present"
