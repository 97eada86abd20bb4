"""
Configuration for image extraction.

Provides structured options using dataclasses with clear defaults and
backward compatibility with dict-based configs.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class ExtractionOptions:
    """
    Options for batch image extraction.

    Example:
        >>> options = ExtractionOptions(strict=True, max_image_pixels=4096 * 4096)
        >>> extract_images("scan.pdf", options=options)
    """
    enabled: bool = True
    strict: bool = False  # Re-raise the first decoding failure instead of recording it
    include_pixels: bool = True  # Keep decoded rasters on results
    max_image_pixels: Optional[int] = None  # Larger images fail before decoding; None disables
    log_failures: bool = True  # Log failed images at error level

    def validate(self) -> bool:
        """
        Validate configuration values.

        Returns:
            True if all values are valid, False otherwise
        """
        if self.max_image_pixels is not None and self.max_image_pixels < 1:
            logger.error("max_image_pixels must be at least 1")
            return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'enabled': self.enabled,
            'strict': self.strict,
            'include_pixels': self.include_pixels,
            'max_image_pixels': self.max_image_pixels,
            'log_failures': self.log_failures,
        }

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'ExtractionOptions':
        """
        Create ExtractionOptions from dictionary.

        Unknown keys are ignored with a warning.
        """
        valid_keys = {'enabled', 'strict', 'include_pixels', 'max_image_pixels', 'log_failures'}

        # Filter to valid keys and warn about unknown keys
        filtered_config = {}
        for key, value in config.items():
            if key in valid_keys:
                filtered_config[key] = value
            else:
                logger.warning(f"Unknown config key '{key}' will be ignored")

        return cls(**filtered_config)

    @classmethod
    def default(cls) -> 'ExtractionOptions':
        """Create configuration with default values."""
        return cls()

    def __repr__(self) -> str:
        return (
            f"ExtractionOptions("
            f"enabled={self.enabled}, "
            f"strict={self.strict}, "
            f"pixels={self.include_pixels}, "
            f"max_pixels={self.max_image_pixels})"
        )
