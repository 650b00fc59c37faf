"""
Global Configuration and Tuning Defaults.

This module centralizes the tuning constants of the graph engine: chunk
sizes for cooperative building, the identity pattern used for origin
detection, the highlight palette, and the layout stabilization window.

Defaults can be overridden from a YAML file (``.mutualgraph/config.yaml``)
under a top-level ``mutualgraph:`` key.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(".mutualgraph/config.yaml")
CONFIG_ENV_VAR = "MUTUALGRAPH_CONFIG"

# --- Avatar CDN ---
AVATAR_CDN = "https://cdn.discordapp.com"
AVATAR_SIZE = 128


class Palette(BaseModel):
    """Colors applied by the selection engine on top of the base node colors."""

    highlight_background: str = "#f6c177"
    highlight_border: str = "#845a2c"
    neighbor_background: str = "#9cb9d9"
    dim_background: str = "#394b5a"
    neighbor_opacity: float = 0.9
    dim_opacity: float = 0.35
    search_dim_opacity: float = 0.4
    avatar_dim_opacity: float = 0.35


class Settings(BaseModel):
    """Tuning constants for one engine instance."""

    model_config = ConfigDict(extra="ignore")

    # Builder chunking (items between cooperative yields)
    node_chunk: int = Field(default=500, gt=0)
    edge_chunk: int = Field(default=4000, gt=0)

    # Snowflake-shaped ids (all digits, typically 17-20 long; 15-22 accepted)
    identity_pattern: str = r"^\d{15,22}$"

    # Layout stabilization fallback, in seconds
    stabilize_min_seconds: float = 6.0
    stabilize_max_seconds: float = 15.0
    stabilize_seconds_per_node: float = 0.005

    # Search debounce (one recomputation per display refresh)
    frame_interval: float = 1 / 60

    # Mutuals breakdown
    max_listed_mutuals: int = 200

    palette: Palette = Field(default_factory=Palette)

    def stabilize_timeout(self, node_count: int) -> float:
        """Fallback window for the layout stabilization notification."""
        scaled = node_count * self.stabilize_seconds_per_node
        return min(self.stabilize_max_seconds, max(self.stabilize_min_seconds, scaled))


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return {}
    if not isinstance(data, dict):
        return {}
    section = data.get("mutualgraph", {})
    return section if isinstance(section, dict) else {}


def load_settings(path: Path | str | None = None) -> Settings:
    """
    Load settings, applying YAML overrides when a config file exists.

    Resolution order: explicit ``path``, then ``$MUTUALGRAPH_CONFIG``, then
    ``.mutualgraph/config.yaml``. Invalid values raise pydantic's
    ValidationError.
    """
    if path is None:
        env_path = os.getenv(CONFIG_ENV_VAR)
        path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH
    config_path = Path(path)

    if not config_path.exists():
        return Settings()

    overrides = _read_yaml(config_path)
    logger.debug(f"Loaded {len(overrides)} setting overrides from {config_path}")
    return Settings.model_validate(overrides)
