"""
Layout Model Profiles

Named Model presets loaded from model_profiles.yaml, and loading of user
model files. Lets callers tune the layout without modifying code.

User file format (YAML):
```yaml
profile: blocked      # optional preset to start from
repulse: 2.5          # any Model field overrides the preset
n_blocks: 20
```
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .layout.model import Model

logger = logging.getLogger(__name__)

DEFAULT_PROFILES_PATH = Path(__file__).parent / "model_profiles.yaml"


def _read_yaml_mapping(path: Path) -> Dict[str, Any]:
    """Load a YAML file whose top level must be a mapping."""
    if not path.exists():
        raise FileNotFoundError(f"Model configuration file not found: {path}")

    # Security: Check for symlinks to prevent reading unintended files
    if path.is_symlink():
        raise ValueError(f"Model configuration file cannot be a symlink: {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Model configuration file must contain a mapping, got {type(data).__name__}: {path}"
        )
    return data


class ModelProfiles:
    """Manager for named Model presets.

    Loads model_profiles.yaml by default, but allows users to provide
    their own profiles file.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path = Path(config_path) if config_path else DEFAULT_PROFILES_PATH
        self._profiles: Dict[str, Model] = {}
        self._load_config()

    def _load_config(self):
        config = _read_yaml_mapping(self.config_path)
        if "profiles" not in config:
            raise ValueError(
                f"Configuration file missing required section 'profiles': {self.config_path}"
            )

        for name, params in (config["profiles"] or {}).items():
            if not isinstance(params, dict):
                raise ValueError(f"Profile '{name}' must be a mapping of model parameters")
            try:
                self._profiles[name] = Model.from_dict(params)
            except ValueError as e:
                raise ValueError(f"Invalid profile '{name}': {e}") from e

        logger.debug("Loaded %d model profiles from %s",
                     len(self._profiles), self.config_path)

    def get(self, name: str) -> Model:
        """Get a profile by name."""
        if name not in self._profiles:
            available = ", ".join(self.names())
            raise ValueError(f"Unknown model profile '{name}'. Available: {available}")
        return self._profiles[name]

    def names(self) -> List[str]:
        return sorted(self._profiles.keys())


_default_profiles: Optional[ModelProfiles] = None


def _profiles() -> ModelProfiles:
    global _default_profiles
    if _default_profiles is None:
        _default_profiles = ModelProfiles()
    return _default_profiles


def get_profile(name: str) -> Model:
    """
    Get a built-in model profile by name.

    Args:
        name: Profile name (e.g., "default", "blocked")

    Returns:
        Model preset

    Raises:
        ValueError: If profile name is not found
    """
    return _profiles().get(name)


def list_profiles() -> List[str]:
    """List all built-in profile names."""
    return _profiles().names()


def load_model(path: Union[str, Path], base: Optional[Model] = None) -> Model:
    """
    Load a Model from a YAML file.

    A ``profile`` key selects a built-in preset as the starting point;
    every other key must be a Model field and overrides it. Without a
    ``profile`` key the file is applied on top of ``base`` (or the
    all-defaults Model).

    Args:
        path: Path to the YAML file
        base: Model to start from when the file names no profile

    Returns:
        The resulting Model
    """
    path = Path(path)
    data = _read_yaml_mapping(path)

    profile_name = data.pop("profile", None)
    if profile_name is not None:
        start = get_profile(str(profile_name))
    else:
        start = base or Model()

    merged = start.to_dict()
    merged.update(data)
    model = Model.from_dict(merged)

    logger.info("Loaded layout model from %s%s", path,
                f" (profile '{profile_name}')" if profile_name else "")
    return model
