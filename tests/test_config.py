import pytest
from pydantic import ValidationError

from pestle.config import PestleConfig, bootstrap, load_config


def test_load_minimal_config(tmp_path):
    config_file = tmp_path / "pestle.yaml"
    config_file.write_text("extensions:\n  - my_project.expectations\n")
    config = load_config(config_file)
    assert config.extensions == ["my_project.expectations"]
    assert config.repeat == 1
    assert config.verbose is False


def test_load_empty_config_uses_defaults(tmp_path):
    config_file = tmp_path / "pestle.yaml"
    config_file.write_text("")
    config = load_config(config_file)
    assert config.extensions == []
    assert config.output_dir == str((tmp_path / "runs").resolve())


def test_load_full_config(tmp_path):
    config_file = tmp_path / "pestle.yaml"
    config_file.write_text(
        """
extensions:
  - ext_one
  - ext_two
repeat: 3
output_dir: /tmp/pestle-runs
verbose: true
"""
    )
    config = load_config(config_file)
    assert config.extensions == ["ext_one", "ext_two"]
    assert config.repeat == 3
    assert config.output_dir == "/tmp/pestle-runs"
    assert config.verbose is True


def test_relative_output_dir_resolves_against_config_location(tmp_path):
    nested = tmp_path / "project"
    nested.mkdir()
    config_file = nested / "pestle.yaml"
    config_file.write_text("output_dir: reports/runs\n")
    config = load_config(config_file)
    assert config.output_dir == str((nested / "reports" / "runs").resolve())


def test_unknown_keys_are_rejected(tmp_path):
    config_file = tmp_path / "pestle.yaml"
    config_file.write_text("extensions: []\nbogus: true\n")
    with pytest.raises(ValidationError):
        load_config(config_file)


def test_repeat_must_be_positive():
    with pytest.raises(ValidationError):
        PestleConfig(repeat=0)


def test_blank_extension_names_are_rejected():
    with pytest.raises(ValidationError):
        PestleConfig(extensions=["  "])


def test_output_dir_expands_environment_variables(monkeypatch):
    monkeypatch.setenv("PESTLE_TEST_ROOT", "/srv/ci")
    config = PestleConfig(output_dir="${PESTLE_TEST_ROOT}/runs")
    assert config.output_dir == "/srv/ci/runs"


def test_output_dir_env_default(monkeypatch):
    monkeypatch.delenv("PESTLE_TEST_UNSET", raising=False)
    config = PestleConfig(output_dir="${PESTLE_TEST_UNSET:-fallback}/runs")
    assert config.output_dir == "fallback/runs"


def test_output_dir_missing_variable_is_an_error(monkeypatch):
    monkeypatch.delenv("PESTLE_TEST_UNSET", raising=False)
    with pytest.raises(ValidationError, match="missing environment variable"):
        PestleConfig(output_dir="${PESTLE_TEST_UNSET}/runs")


# --- bootstrap ---


def _write_module(directory, name, body):
    (directory / f"{name}.py").write_text(body)


def test_bootstrap_calls_register(tmp_path, monkeypatch, registry):
    _write_module(
        tmp_path,
        "pestle_cfg_register_ext",
        "def register(registry):\n"
        "    registry.extend('to_be_answer', lambda self: self.to_be(42))\n",
    )
    monkeypatch.syspath_prepend(str(tmp_path))

    result = bootstrap(PestleConfig(extensions=["pestle_cfg_register_ext"]), registry)

    assert result is registry
    assert registry.has_extend("to_be_answer")
    assert "pestle_cfg_register_ext" in registry.loaded_modules


def test_bootstrap_is_idempotent_per_registry(tmp_path, monkeypatch, registry):
    _write_module(
        tmp_path,
        "pestle_cfg_pipe_ext",
        "def register(registry):\n"
        "    registry.pipe('to_be', lambda self, next, *a, **kw: next())\n",
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    config = PestleConfig(extensions=["pestle_cfg_pipe_ext"])

    bootstrap(config, registry)
    bootstrap(config, registry)

    assert len(registry.pipes("to_be")) == 1


def test_bootstrap_without_register_only_imports(tmp_path, monkeypatch, registry):
    _write_module(tmp_path, "pestle_cfg_plain_ext", "LOADED = True\n")
    monkeypatch.syspath_prepend(str(tmp_path))

    bootstrap(PestleConfig(extensions=["pestle_cfg_plain_ext"]), registry)

    assert "pestle_cfg_plain_ext" in registry.loaded_modules
    assert not registry.has_extend("LOADED")


def test_bootstrap_unimportable_module_raises(registry):
    with pytest.raises(ValueError, match="could not be imported"):
        bootstrap(PestleConfig(extensions=["pestle_no_such_module_xyz"]), registry)
