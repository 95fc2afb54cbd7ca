#!/usr/bin/env python3

"""
Configuration management for the exon length pipeline.

Centralized configuration with support for file-based configuration
and environment variable overrides.
"""

import os
import json
from dataclasses import dataclass, asdict, field
from typing import Optional, Dict, Any, Tuple

import yaml

from .exceptions import ConfigurationError

COVERAGE_STRATEGIES = ("buffer", "sweep", "intervaltree", "auto")
DEFAULT_EXTENSIONS = ("gtf", "gff", "gff3")


def _default_workers() -> int:
    return os.cpu_count() or 1


def _as_bool(value: str) -> bool:
    return value.lower() in ('true', '1', 'yes')


def read_config_file(config_path: str) -> Dict[str, Any]:
    """Read a JSON or YAML configuration file into a dictionary."""
    if not os.path.exists(config_path):
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            if config_path.lower().endswith(('.yaml', '.yml')):
                config_data = yaml.safe_load(f)
            else:
                config_data = json.load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML configuration file format: {e}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid configuration file format: {e}")
    except OSError as e:
        raise ConfigurationError(f"Error loading configuration: {e}")

    if not isinstance(config_data, dict):
        raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")
    return config_data


@dataclass
class PipelineConfig:
    """Centralized configuration for the exon length pipeline."""

    # Parallelism
    workers: int = field(default_factory=_default_workers)
    chunk_size: int = 50000  # lines per ingestion chunk

    # Coverage
    coverage_strategy: str = "buffer"
    max_buffer_span: int = 10_000_000  # bp, only used by "auto"

    # Attribute handling
    strip_gene_version: bool = True
    version_separator: str = "."
    require_transcript_id: bool = False

    # Input/output
    allowed_extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    sort_output: bool = False

    # Monitoring
    memory_limit_mb: int = 16384
    enable_memory_monitoring: bool = True
    debug_mode: bool = False

    @classmethod
    def from_file(cls, config_path: str) -> 'PipelineConfig':
        """Load configuration from file (JSON or YAML)."""
        return cls.from_dict(read_config_file(config_path))

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'PipelineConfig':
        """Create configuration from dictionary."""
        # Filter out unknown keys
        known_keys = set(cls.__dataclass_fields__.keys())
        filtered_dict = {k: v for k, v in config_dict.items() if k in known_keys}

        if 'allowed_extensions' in filtered_dict:
            extensions = filtered_dict['allowed_extensions']
            if isinstance(extensions, str):
                extensions = extensions.split(',')
            filtered_dict['allowed_extensions'] = tuple(extensions)

        try:
            return cls(**filtered_dict)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration parameters: {e}")

    @classmethod
    def from_env(cls) -> 'PipelineConfig':
        """Load configuration from environment variables."""
        config = cls()

        env_mappings = {
            'EXON_LENGTH_WORKERS': ('workers', int),
            'EXON_LENGTH_CHUNK_SIZE': ('chunk_size', int),
            'EXON_LENGTH_COVERAGE_STRATEGY': ('coverage_strategy', str),
            'EXON_LENGTH_MAX_BUFFER_SPAN': ('max_buffer_span', int),
            'EXON_LENGTH_MEMORY_LIMIT_MB': ('memory_limit_mb', int),
            'EXON_LENGTH_SORT_OUTPUT': ('sort_output', _as_bool),
            'EXON_LENGTH_DEBUG_MODE': ('debug_mode', _as_bool),
        }

        for env_var, (field_name, converter) in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value:
                try:
                    setattr(config, field_name, converter(env_value))
                except (ValueError, TypeError) as e:
                    raise ConfigurationError(f"Invalid environment variable {env_var}: {e}")

        config.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        config_dict = asdict(self)
        config_dict['allowed_extensions'] = list(self.allowed_extensions)
        return config_dict

    def save_to_file(self, config_path: str) -> None:
        """Save configuration to file."""
        config_dict = self.to_dict()

        try:
            with open(config_path, 'w') as f:
                if config_path.lower().endswith(('.yaml', '.yml')):
                    yaml.safe_dump(config_dict, f, default_flow_style=False)
                else:
                    json.dump(config_dict, f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Error saving configuration: {e}")

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.workers < 1:
            raise ConfigurationError("workers must be >= 1")

        if self.chunk_size < 1:
            raise ConfigurationError("chunk_size must be >= 1")

        if self.coverage_strategy not in COVERAGE_STRATEGIES:
            raise ConfigurationError(
                f"coverage_strategy must be one of {', '.join(COVERAGE_STRATEGIES)}"
            )

        if self.max_buffer_span < 1:
            raise ConfigurationError("max_buffer_span must be >= 1")

        if len(self.version_separator) != 1:
            raise ConfigurationError("version_separator must be a single character")

        if not self.allowed_extensions:
            raise ConfigurationError("allowed_extensions cannot be empty")

        if self.memory_limit_mb < 100:
            raise ConfigurationError("memory_limit_mb must be >= 100")

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.allowed_extensions = tuple(ext.lower().lstrip('.') for ext in self.allowed_extensions)
        self.validate()


def load_config(config_path: Optional[str] = None,
                use_env: bool = True) -> PipelineConfig:
    """
    Load configuration with priority: file > environment > defaults.

    Args:
        config_path: Path to configuration file (optional)
        use_env: Whether to load environment variables

    Returns:
        PipelineConfig: Loaded configuration
    """
    config_dict: Dict[str, Any] = {}

    if use_env:
        config_dict.update(PipelineConfig.from_env().to_dict())

    if config_path:
        # only keys present in the file override environment values
        config_dict.update(read_config_file(config_path))

    return PipelineConfig.from_dict(config_dict)
