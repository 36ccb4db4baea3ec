"""Unified configuration loader.

Settings are resolved in three layers, later layers winning:

1. Defaults declared on the pydantic models below
2. config/tsmend.yaml (or an explicit --config file)
3. TSMEND_* environment variables (a .env file is honoured)
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "tsmend.yaml"

DEFAULT_CLIENT_MODULES = [
    "react-hot-toast",
    "sonner",
    "@dnd-kit",
    "embla-carousel-react",
    "recharts",
    "cmdk",
    "input-otp",
    "react-day-picker",
    "react-hook-form",
    "next-themes",
    "vaul",
]


class SpecialImport(BaseModel):
    """Canonical import for a well-known utility symbol."""
    specifier: str
    is_default: bool = False


class LimitSettings(BaseModel):
    """Resource caps applied when running constrained."""
    constrained: bool = True
    max_scanned_modules: int = 20
    max_export_entries: int = 100
    max_diagnostics_per_file: int = 10
    max_files_per_batch: int = 5
    max_concurrent_preprocess: int = 4


class TscSettings(BaseModel):
    """How diagnostics are obtained from the TypeScript compiler."""
    enabled: bool = True
    command: List[str] = Field(default_factory=lambda: ["npx", "--no-install", "tsc"])
    tsconfig: str = "tsconfig.json"


class FixerSettings(BaseModel):
    """Settings for one auto-fix run."""
    source_root: str = "src"
    alias_prefix: str = "@/"
    index_mode: Literal["full", "targeted"] = "full"
    timeout_seconds: float = 60.0
    skip_preprocessing: bool = False
    client_directive: str = '"use client";'
    client_modules: List[str] = Field(default_factory=lambda: list(DEFAULT_CLIENT_MODULES))
    named_export_allow_list: List[str] = Field(default_factory=list)
    special_imports: Dict[str, SpecialImport] = Field(
        default_factory=lambda: {"cn": SpecialImport(specifier="@/lib/utils")}
    )
    limits: LimitSettings = Field(default_factory=LimitSettings)
    tsc: TscSettings = Field(default_factory=TscSettings)

    def cap(self, value: int) -> Optional[int]:
        """Return a resource cap, or None when running unconstrained."""
        return value if self.limits.constrained else None


def get_config_path() -> Path:
    """Directory holding the bundled configuration files."""
    return Path(__file__).parent.parent.parent.parent / "config"


def load_unified_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """Load the YAML configuration as a plain dict.

    Args:
        config_file: Explicit config path. Defaults to config/tsmend.yaml.

    Raises:
        FileNotFoundError: If an explicit config file does not exist
    """
    if config_file:
        path = Path(config_file)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
    else:
        path = get_config_path() / CONFIG_FILE_NAME
        if not path.exists():
            logger.debug(f"{CONFIG_FILE_NAME} not found at {path}, using defaults")
            return {}

    with open(path, "r") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    logger.debug(f"Loaded config from {path}")
    return config


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay TSMEND_* environment variables onto the config dict."""
    env = os.environ

    if "TSMEND_SOURCE_ROOT" in env:
        config["source_root"] = env["TSMEND_SOURCE_ROOT"]
    if "TSMEND_ALIAS_PREFIX" in env:
        config["alias_prefix"] = env["TSMEND_ALIAS_PREFIX"]
    if "TSMEND_TIMEOUT_SECONDS" in env:
        config["timeout_seconds"] = float(env["TSMEND_TIMEOUT_SECONDS"])
    if "TSMEND_INDEX_MODE" in env:
        config["index_mode"] = env["TSMEND_INDEX_MODE"]

    limits = config.setdefault("limits", {})
    if "TSMEND_CONSTRAINED" in env:
        limits["constrained"] = _env_bool(env["TSMEND_CONSTRAINED"])

    tsc = config.setdefault("tsc", {})
    if "TSMEND_TSC_COMMAND" in env:
        tsc["command"] = env["TSMEND_TSC_COMMAND"].split()
    if "TSMEND_TSC_ENABLED" in env:
        tsc["enabled"] = _env_bool(env["TSMEND_TSC_ENABLED"])

    return config


def get_settings(config_file: Optional[str] = None, **overrides: Any) -> FixerSettings:
    """Build validated settings from YAML, environment and explicit overrides.

    Keyword overrides with a None value are ignored so CLI flags that were
    not given fall through to the configured value.
    """
    config = _apply_env_overrides(load_unified_config(config_file))

    for key, value in overrides.items():
        if value is None:
            continue
        if key in LimitSettings.model_fields:
            config.setdefault("limits", {})[key] = value
        else:
            config[key] = value

    return FixerSettings.model_validate(config)
