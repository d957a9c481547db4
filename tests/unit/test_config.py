"""Unit tests for render configuration."""

import pytest
from omegaconf.errors import ConfigKeyError

from tikzpictures.config import (
    RenderConfig,
    get_config,
    standalone_workaround,
    tikz_command,
    tikz_delete_intermediate,
    tikz_use_pdf2svg,
)


@pytest.mark.unit
def test_packaged_defaults():
    """Test defaults loaded from defaults.yaml."""
    config = RenderConfig()

    assert config.latex_command == "lualatex"
    assert config.delete_intermediate is True
    assert config.use_pdf2svg is True
    assert config.standalone_workaround is False
    assert config.timeout is None
    assert config.rerun_signatures == ["LaTeX Warning: Label(s)"]
    assert config.workaround_signatures == [r"\sa@placebox ->\newpage \global \pdfpagewidth"]


@pytest.mark.unit
def test_signature_lists_not_shared():
    """Test each config gets its own signature lists."""
    first = RenderConfig()
    second = RenderConfig()
    first.rerun_signatures.append("Rerun to get")

    assert "Rerun to get" not in second.rerun_signatures


@pytest.mark.unit
def test_from_yaml_overrides(tmp_path):
    """Test a user YAML file is merged over the defaults."""
    config_path = tmp_path / "tikz.yaml"
    config_path.write_text(
        "latex_command: xelatex\n"
        "timeout: 30\n"
        "workaround_signatures:\n"
        "  - 'custom signature'\n"
    )

    config = RenderConfig.from_yaml(config_path)

    assert isinstance(config, RenderConfig)
    assert config.latex_command == "xelatex"
    assert config.timeout == 30.0
    assert config.workaround_signatures == ["custom signature"]
    assert config.delete_intermediate is True


@pytest.mark.unit
def test_from_yaml_rejects_unknown_keys(tmp_path):
    """Test typos in config files are reported."""
    config_path = tmp_path / "tikz.yaml"
    config_path.write_text("latex_comand: xelatex\n")

    with pytest.raises(ConfigKeyError):
        RenderConfig.from_yaml(config_path)


@pytest.mark.unit
def test_from_env(monkeypatch):
    """Test environment variables override defaults."""
    monkeypatch.delenv("TIKZ_CONFIG", raising=False)
    monkeypatch.setenv("TIKZ_COMMAND", "pdflatex")
    monkeypatch.setenv("TIKZ_DELETE_INTERMEDIATE", "false")
    monkeypatch.setenv("TIKZ_USE_PDF2SVG", "0")
    monkeypatch.setenv("TIKZ_TIMEOUT", "12.5")

    config = RenderConfig.from_env()

    assert config.latex_command == "pdflatex"
    assert config.delete_intermediate is False
    assert config.use_pdf2svg is False
    assert config.timeout == 12.5


@pytest.mark.unit
def test_accessor_pairs(global_config):
    """Test get/set accessors act on the process-wide config."""
    assert tikz_command() == "lualatex"
    tikz_command("xelatex")
    assert tikz_command() == "xelatex"
    assert get_config().latex_command == "xelatex"

    tikz_delete_intermediate(False)
    assert tikz_delete_intermediate() is False

    tikz_use_pdf2svg(False)
    assert tikz_use_pdf2svg() is False

    assert standalone_workaround() is False
    standalone_workaround(True)
    assert standalone_workaround() is True
    assert global_config.standalone_workaround is True
