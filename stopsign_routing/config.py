"""
Configuration management with YAML loading and validation.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml


logger = logging.getLogger(__name__)


@dataclass
class HSVRange:
    """Inclusive HSV bounds, OpenCV 8-bit scale (hue 0-179)."""
    low: List[int]
    high: List[int]

    def __post_init__(self):
        if len(self.low) != 3 or len(self.high) != 3:
            raise ValueError(f"HSV bounds need 3 values each, got {self.low} / {self.high}")


def _default_red_ranges() -> List[HSVRange]:
    # Red wraps around the hue axis, so it needs one band at each end.
    return [
        HSVRange(low=[0, 70, 50], high=[10, 255, 255]),
        HSVRange(low=[170, 70, 50], high=[180, 255, 255]),
    ]


@dataclass
class DetectorConfig:
    """Stop sign segmentation and shape filter settings."""
    red_ranges: List[HSVRange] = field(default_factory=_default_red_ranges)
    morph_kernel_size: int = 3
    morph_iterations: int = 2
    epsilon_ratio: float = 0.02  # approxPolyDP tolerance as a fraction of perimeter
    min_area: float = 1000.0     # px^2, strict lower bound

    def __post_init__(self):
        if self.morph_kernel_size < 1:
            raise ValueError(f"morph_kernel_size must be >= 1, got {self.morph_kernel_size}")
        if self.morph_iterations < 0:
            raise ValueError(f"morph_iterations must be >= 0, got {self.morph_iterations}")
        if self.epsilon_ratio <= 0:
            raise ValueError(f"epsilon_ratio must be > 0, got {self.epsilon_ratio}")
        if self.min_area < 0:
            raise ValueError(f"min_area must be >= 0, got {self.min_area}")


@dataclass
class MatchingConfig:
    """Route node / detection association."""
    proximity_threshold: float = 50.0  # same units as route coordinates

    def __post_init__(self):
        if self.proximity_threshold < 0:
            raise ValueError(
                f"proximity_threshold must be >= 0, got {self.proximity_threshold}"
            )


@dataclass
class Config:
    """Root configuration."""
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config.

    Returns:
        Config object with all settings.
    """
    if config_path is None:
        return Config()

    path = Path(config_path)
    if not path.exists():
        logger.warning(f"{config_path} not found, using defaults")
        return Config()

    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: expected a mapping at top level, got {type(data).__name__}")

    return _dict_to_config(data)


def _dict_to_config(data: dict) -> Config:
    """Convert dictionary to Config object."""
    config = Config()

    # Detector
    if "detector" in data:
        d = data["detector"] or {}
        red_ranges = config.detector.red_ranges
        if "red_ranges" in d:
            red_ranges = [
                HSVRange(low=list(r["low"]), high=list(r["high"]))
                for r in d["red_ranges"]
            ]
        config.detector = DetectorConfig(
            red_ranges=red_ranges,
            morph_kernel_size=d.get("morph_kernel_size", config.detector.morph_kernel_size),
            morph_iterations=d.get("morph_iterations", config.detector.morph_iterations),
            epsilon_ratio=d.get("epsilon_ratio", config.detector.epsilon_ratio),
            min_area=d.get("min_area", config.detector.min_area),
        )

    # Matching
    if "matching" in data:
        m = data["matching"] or {}
        config.matching = MatchingConfig(
            proximity_threshold=m.get(
                "proximity_threshold", config.matching.proximity_threshold
            ),
        )

    return config


def save_config(config: Config, path: str) -> None:
    """Save configuration to YAML file."""
    data = {
        "detector": {
            "red_ranges": [
                {"low": list(r.low), "high": list(r.high)}
                for r in config.detector.red_ranges
            ],
            "morph_kernel_size": config.detector.morph_kernel_size,
            "morph_iterations": config.detector.morph_iterations,
            "epsilon_ratio": config.detector.epsilon_ratio,
            "min_area": config.detector.min_area,
        },
        "matching": {
            "proximity_threshold": config.matching.proximity_threshold,
        },
    }

    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
