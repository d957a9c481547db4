"""
Render Configuration

Settings shared by every render operation: which LaTeX engine to call, whether
intermediate files are deleted, which SVG conversion route to take, and the
sticky standalone workaround flag.

Defaults come from the packaged defaults.yaml, are overridden by environment
variables (TIKZ_COMMAND, TIKZ_DELETE_INTERMEDIATE, TIKZ_USE_PDF2SVG,
TIKZ_TIMEOUT) and finally by a user YAML file named in TIKZ_CONFIG.

Examples:
    # Explicit configuration object passed into pipeline operations
    >>> config = RenderConfig(latex_command="xelatex", delete_intermediate=False)
    >>> save(PDF("figure"), picture, config=config)

    # Process-wide default, mutated through accessor pairs
    >>> tikz_command("pdflatex")
    >>> tikz_command()
    'pdflatex'
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"

_DEFAULTS = OmegaConf.to_container(OmegaConf.load(DEFAULTS_PATH), resolve=True)


@dataclass
class RenderConfig:
    """
    Settings for one logical render session.

    Attributes:
        latex_command: Engine executable (e.g., "lualatex", "xelatex")
        delete_intermediate: Remove scratch directories and temporary SVGs afterwards
        use_pdf2svg: True renders PDF then runs pdf2svg; False renders DVI then runs dvisvgm
        standalone_workaround: Emit \\RequirePackage{luatex85}; set at most once per session
        timeout: Seconds before an external tool is abandoned (None waits forever)
        rerun_signatures: Log substrings that require a second engine pass
        workaround_signatures: Log substrings that enable the standalone workaround
    """

    latex_command: str = _DEFAULTS["latex_command"]
    delete_intermediate: bool = _DEFAULTS["delete_intermediate"]
    use_pdf2svg: bool = _DEFAULTS["use_pdf2svg"]
    standalone_workaround: bool = _DEFAULTS["standalone_workaround"]
    timeout: Optional[float] = _DEFAULTS["timeout"]
    rerun_signatures: List[str] = field(
        default_factory=lambda: list(_DEFAULTS["rerun_signatures"])
    )
    workaround_signatures: List[str] = field(
        default_factory=lambda: list(_DEFAULTS["workaround_signatures"])
    )

    @classmethod
    def from_yaml(cls, config_path: Path) -> "RenderConfig":
        """
        Load a configuration file on top of the defaults.

        Unknown keys are rejected by OmegaConf's structured merge.

        Args:
            config_path: YAML file with any subset of RenderConfig fields

        Returns:
            RenderConfig with the file's values applied
        """
        schema = OmegaConf.structured(cls)
        merged = OmegaConf.merge(schema, OmegaConf.load(config_path))
        return OmegaConf.to_object(merged)

    @classmethod
    def from_env(cls) -> "RenderConfig":
        """Build a configuration from defaults, environment variables and TIKZ_CONFIG."""
        config_path = os.getenv("TIKZ_CONFIG")
        config = cls.from_yaml(Path(config_path)) if config_path else cls()

        if os.getenv("TIKZ_COMMAND"):
            config.latex_command = os.getenv("TIKZ_COMMAND")
        if os.getenv("TIKZ_DELETE_INTERMEDIATE"):
            config.delete_intermediate = _env_flag("TIKZ_DELETE_INTERMEDIATE")
        if os.getenv("TIKZ_USE_PDF2SVG"):
            config.use_pdf2svg = _env_flag("TIKZ_USE_PDF2SVG")
        if os.getenv("TIKZ_TIMEOUT"):
            config.timeout = float(os.getenv("TIKZ_TIMEOUT"))

        return config


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


# Process-wide default used when callers don't pass a config explicitly
_config = RenderConfig.from_env()


def get_config() -> RenderConfig:
    """Return the process-wide default configuration."""
    return _config


def set_config(config: RenderConfig) -> None:
    """Replace the process-wide default configuration."""
    global _config
    _config = config


def reset_config() -> RenderConfig:
    """Rebuild the process-wide default from defaults and environment."""
    global _config
    _config = RenderConfig.from_env()
    return _config


# Get/set accessor pairs on the process-wide default.
# Called with no argument they return the current value.


def tikz_command(value: Optional[str] = None) -> Optional[str]:
    """Get or set the LaTeX engine command."""
    if value is None:
        return _config.latex_command
    _config.latex_command = value
    return None


def tikz_delete_intermediate(value: Optional[bool] = None) -> Optional[bool]:
    """Get or set whether intermediate files are deleted."""
    if value is None:
        return _config.delete_intermediate
    _config.delete_intermediate = value
    return None


def tikz_use_pdf2svg(value: Optional[bool] = None) -> Optional[bool]:
    """Get or set the SVG conversion route (True: PDF + pdf2svg, False: DVI + dvisvgm)."""
    if value is None:
        return _config.use_pdf2svg
    _config.use_pdf2svg = value
    return None


def standalone_workaround(value: Optional[bool] = None) -> Optional[bool]:
    """Get or set the sticky standalone workaround flag."""
    if value is None:
        return _config.standalone_workaround
    _config.standalone_workaround = value
    return None
