from __future__ import annotations

import importlib
import logging
from pathlib import Path

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, field_validator

from pestle.registry import ExtensionRegistry, default_registry

logger = logging.getLogger(__name__)


class PestleConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    extensions: list[str] = []
    repeat: int = 1
    output_dir: str = "runs"
    verbose: bool = False

    @field_validator("extensions")
    @classmethod
    def no_blank_extension_modules(cls, v: list[str]) -> list[str]:
        for name in v:
            if not name.strip():
                raise ValueError("extension module names must not be blank")
        return v

    @field_validator("repeat")
    @classmethod
    def repeat_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"repeat must be at least 1, got {v}")
        return v

    @field_validator("output_dir")
    @classmethod
    def expand_output_dir(cls, v: str) -> str:
        """Expand ${VAR} references; a missing variable without default is an error."""
        try:
            return expandvars(v, nounset=True)
        except Exception as e:
            raise ValueError(f"output_dir '{v}' references a missing environment variable: {e}")


def load_config(path: Path) -> PestleConfig:
    """Load and validate a pestle config from a YAML file."""
    config_dir = path.parent.resolve()

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    config = PestleConfig(**raw)

    # Resolve a relative output_dir relative to the config file location
    output_path = Path(config.output_dir)
    if not output_path.is_absolute():
        config.output_dir = str((config_dir / output_path).resolve())

    return config


def bootstrap(
    config: PestleConfig, registry: ExtensionRegistry | None = None
) -> ExtensionRegistry:
    """Import the configured extension modules into ``registry``.

    A module either registers its extensions on import through the
    module-level ``pestle.extend`` helpers, or defines ``register(registry)``,
    which is called with the registry being bootstrapped. Each module is
    registered once per registry.
    """
    if registry is None:
        registry = default_registry

    for module_name in config.extensions:
        if module_name in registry.loaded_modules:
            continue
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise ValueError(
                f"Extension module '{module_name}' could not be imported: {e}"
            ) from e

        register = getattr(module, "register", None)
        if callable(register):
            register(registry)
        registry.loaded_modules.add(module_name)
        logger.debug(f"Loaded extension module '{module_name}'")

    return registry
