"""
Configuration loading for TeXpress.

Settings live in texpress/config/defaults.yaml and are loaded with OmegaConf.
Environment variables (including those from a .env file) reach the YAML through
${oc.env:VAR,default} interpolation. TEXPRESS_CONFIG may point to an override
file that is merged on top of the defaults.

Example:
    from texpress.utils.settings import get_settings

    settings = get_settings()
    settings.compilation.fallback_order
    # ['native_latex', 'docker_latex', 'browser_html', 'remote_api', 'manual_parse']
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

load_dotenv()

DEFAULTS_PATH = Path(__file__).resolve().parent.parent / "config" / "defaults.yaml"


def load_settings(override_path: Optional[Path] = None) -> DictConfig:
    """
    Build a resolved, read-only settings object.

    Args:
        override_path: Optional YAML file merged on top of the defaults

    Returns:
        Read-only DictConfig with all interpolations resolved

    Raises:
        FileNotFoundError: If override_path is given but does not exist
    """
    config = OmegaConf.load(DEFAULTS_PATH)

    if override_path is not None:
        override_path = Path(override_path)
        if not override_path.exists():
            raise FileNotFoundError(f"Settings override not found: {override_path}")
        config = OmegaConf.merge(config, OmegaConf.load(override_path))

    # Resolve env interpolations once so later reads are stable
    resolved = OmegaConf.create(OmegaConf.to_container(config, resolve=True))
    OmegaConf.set_readonly(resolved, True)
    return resolved


@lru_cache(maxsize=None)
def get_settings() -> DictConfig:
    """Process-wide settings, loaded on first access."""
    override = os.getenv("TEXPRESS_CONFIG")
    return load_settings(Path(override) if override else None)
