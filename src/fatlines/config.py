"""
Configuration management for fatlines.

Dataclass defaults for the engine, unification, validation and tracing,
optionally overridden from a YAML file.
"""

import os
from dataclasses import asdict, dataclass, field

import yaml

from fatlines.errors import ConfigError


@dataclass
class OverlapConfig:
    """Tolerances of the overlap index."""
    angle_tolerance: float = 1e-3  # radians, ~0.057 degrees
    long_tolerance: float = 1e-6
    thickness_tolerance: float = 0.0
    epsilon: float = 1e-5


@dataclass
class UnifyConfig:
    """Configuration for collinear line unification."""
    tolerance: float = 1e-4


@dataclass
class ValidationConfig:
    """Configuration for group validation."""
    enabled: bool = True
    tolerance: float = 1e-5


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class EngineConfig:
    """Complete configuration."""
    overlap: OverlapConfig = field(default_factory=OverlapConfig)
    unify: UnifyConfig = field(default_factory=UnifyConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)


_SECTIONS = ("overlap", "unify", "validation", "tracing")


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values; unknown keys are ignored.
    """
    config = EngineConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    validate_overlap_config(config.overlap)
    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass."""
    for section_name in _SECTIONS:
        section_data = yaml_data.get(section_name) or {}
        section = getattr(config, section_name)
        for key, value in section_data.items():
            if not hasattr(section, key):
                continue
            # PyYAML reads "1e-3" as a string
            if isinstance(getattr(section, key), float):
                try:
                    value = float(value)
                except (TypeError, ValueError) as e:
                    raise ConfigError(f"{section_name}.{key}: expected a number, got {value!r}") from e
            setattr(section, key, value)
    return config


def validate_overlap_config(overlap):
    """Reject tolerances the sweeps cannot work with."""
    if not overlap.angle_tolerance > 0:
        raise ConfigError(f"angle_tolerance must be positive, got {overlap.angle_tolerance}")
    if overlap.long_tolerance < 0:
        raise ConfigError(f"long_tolerance must be non-negative, got {overlap.long_tolerance}")
    if overlap.thickness_tolerance < 0:
        raise ConfigError(f"thickness_tolerance must be non-negative, got {overlap.thickness_tolerance}")
    if not overlap.epsilon > 0:
        raise ConfigError(f"epsilon must be positive, got {overlap.epsilon}")


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    yaml_data = asdict(EngineConfig())
    # file_path is a per-run choice
    yaml_data["tracing"].pop("file_path", None)

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
