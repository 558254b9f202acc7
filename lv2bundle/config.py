"""
Pipeline configuration.

Settings for the bundle aggregator, validator and parser. The pipeline
reads no files or environment variables; callers build a
``PipelineConfig`` directly or from a dictionary.

Usage:
    config = PipelineConfig.from_dict({"max_workers": 1, "require_binary": False})
    result = BundleAggregator(config).load(documents, "file:///amp.lv2/")
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_NAME = "manifest.ttl"
DEFAULT_BASE_URI = "file:///bundle/"


@dataclass(frozen=True)
class PipelineConfig:
    """Configuration for loading, validating and dumping bundles.

    Attributes:
        manifest_name: Logical name of the manifest document (default: manifest.ttl)
        max_workers: Threads used to parse documents; 1 parses serially (default: 4)
        require_binary: Treat a plugin without lv2:binary as an error (default: True)
        allow_bidirectional_ports: Allow a port to be both input and output (default: True)
        max_short_name_length: Longer short names produce a warning (default: 16)
        large_document_bytes: Documents above this size log a warning (default: 5 MB)
        default_base_uri: Bundle base used when the caller supplies none
    """
    manifest_name: str = DEFAULT_MANIFEST_NAME
    max_workers: int = 4
    require_binary: bool = True
    allow_bidirectional_ports: bool = True
    max_short_name_length: int = 16
    large_document_bytes: int = 5_000_000
    default_base_uri: str = DEFAULT_BASE_URI

    def __post_init__(self):
        """Validate configuration values."""
        if not self.manifest_name or "/" in self.manifest_name:
            raise ValueError("manifest_name must be a non-empty document name")
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        if self.max_short_name_length < 1:
            raise ValueError("max_short_name_length must be >= 1")
        if self.large_document_bytes < 1:
            raise ValueError("large_document_bytes must be >= 1")
        if not self.default_base_uri:
            raise ValueError("default_base_uri must not be empty")

    @classmethod
    def from_dict(cls, config_dict: Optional[Dict[str, Any]]) -> 'PipelineConfig':
        """Create config from dictionary.

        Unknown keys are ignored with a warning.

        Args:
            config_dict: Configuration dictionary (can be None for defaults)

        Returns:
            PipelineConfig instance
        """
        if config_dict is None:
            return cls()

        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(config_dict) - known)
        if unknown:
            logger.warning(f"Ignoring unknown pipeline config keys: {unknown}")

        return cls(**{k: v for k, v in config_dict.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_CONFIG = PipelineConfig()
