"""
config.py - Configuration model for subgrab
"""

from pathlib import Path
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.console import Console
import sys

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

from .__version__ import __version__

console = Console()

DEFAULT_CONFIG_PATH = Path("subgrab.toml")
DEFAULT_USER_AGENT = f"subgrab/{__version__}"


class ToolsConfig(BaseModel):
    """External programs used by the optional mux step."""

    model_config = ConfigDict(extra="forbid")

    ffmpeg: str = Field(default="ffmpeg", description="ffmpeg executable name or path")
    ffprobe: str = Field(default="ffprobe", description="ffprobe executable name or path")


class SubgrabConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    language: str = Field(
        default="eng",
        min_length=2,
        description="OpenSubtitles sublanguageid used when --language is not given"
    )
    top: int = Field(
        default=1,
        ge=1,
        description="How many top-rated results to offer when --top is not given"
    )
    user_agent: str = DEFAULT_USER_AGENT
    log_file: Optional[Path] = None
    debug: bool = False
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    config_path: Optional[Path] = None


def load_config(config_path: Optional[Path] = None) -> SubgrabConfig:
    """Load configuration from a TOML file.

    With no explicit path the default ``subgrab.toml`` is read when present,
    and built-in defaults are used otherwise. An explicit path that does not
    exist is an error.
    """
    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return SubgrabConfig()
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        console.print(f"[red][ERROR][/red] Configuration file not found: {config_path}")
        sys.exit(1)

    try:
        with open(config_path, "rb") as f:
            config_data = tomllib.load(f)

        return SubgrabConfig(
            **config_data.get("subgrab", {}),
            tools=ToolsConfig(**config_data.get("tools", {})),
            config_path=config_path,
        )

    except (OSError, tomllib.TOMLDecodeError, ValidationError, TypeError) as e:
        console.print(f"[red][ERROR][/red] Error loading configuration: {e}")
        sys.exit(1)
