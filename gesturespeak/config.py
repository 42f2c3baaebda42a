"""
Configuration management for the gesture classification engine.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, List, Type, TypeVar
from dataclasses import dataclass, field, fields


T = TypeVar("T")


class ConfigError(ValueError):
    """Raised when a configuration file contains unknown or malformed sections."""


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int = 0
    width: int = 1280
    height: int = 720
    fps: int = 30


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int = 2
    min_detection_confidence: float = 0.8
    min_tracking_confidence: float = 0.6


@dataclass
class AudioConfig:
    """Microphone transient detector settings."""
    enabled: bool = False
    threshold: float = 0.25  # normalized peak amplitude, 0..1
    cooldown_ms: int = 400
    rate: int = 16000
    chunk: int = 1024


@dataclass
class DebounceConfig:
    """Stability / cooldown windows of the confirmation state machine."""
    stability_ms: int = 200
    cooldown_ms: int = 2000
    min_confidence: float = 0.8


@dataclass
class StaticConfig:
    """Thresholds for the single-hand rules."""
    frame_mid_x: float = 0.5
    curl_margin: float = 0.01
    fist_compactness: float = 0.6
    fist_spread: float = 0.45
    finger_ratio_min: float = 0.3
    finger_ratio_max: float = 2.5
    victory_segment_ratio: float = 0.98
    victory_min_spread: float = 0.25
    victory_min_angle: float = 45.0
    victory_max_angle: float = 125.0
    backhand_normal_z: float = -0.3


@dataclass
class RelationalConfig:
    """Thresholds for the two-hand rules."""
    namaste_palm_distance: float = 0.12
    namaste_wrist_distance: float = 0.14
    namaste_tip_distance: float = 0.06
    namaste_normal_dot: float = -0.2
    namaste_pinky_only: bool = False
    clap_distance: float = 0.12
    clap_closing_delta: float = 0.12
    clap_closing_frames: int = 5
    clap_require_closure: bool = True
    clap_audio_window_ms: int = 800
    cross_margin: float = 0.02
    raise_margin: float = 0.02


@dataclass
class TemporalConfig:
    """Per-hand motion history settings."""
    history_size: int = 30
    wave_min_reversals: int = 2
    wave_min_amplitude: float = 0.06
    wave_jitter: float = 0.005
    raise_frames: int = 6
    raise_max_wrist_y: float = 0.35


@dataclass
class GestureMapping:
    """Phrase attached to a gesture label."""
    name: str
    text: str
    enabled: bool = True


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    debounce: DebounceConfig = field(default_factory=DebounceConfig)
    static: StaticConfig = field(default_factory=StaticConfig)
    relational: RelationalConfig = field(default_factory=RelationalConfig)
    temporal: TemporalConfig = field(default_factory=TemporalConfig)
    mappings: List[GestureMapping] = field(default_factory=list)

    def find_mapping(self, label: str) -> Optional[GestureMapping]:
        """Return the enabled mapping for a gesture label, if any."""
        for mapping in self.mappings:
            if mapping.name == label and mapping.enabled:
                return mapping
        return None


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        # Use default config file in project root
        project_root = Path(__file__).parent.parent
        path = project_root / "config.default.yaml"

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return _dict_to_config(data)


def _section(cls: Type[T], name: str, data: Optional[Dict[str, Any]]) -> T:
    """Build one config dataclass, rejecting keys it does not declare."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown keys in section '{name}': {sorted(unknown)}")
    return cls(**data)


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    sections = {
        'camera': CameraConfig,
        'mediapipe': MediaPipeConfig,
        'audio': AudioConfig,
        'debounce': DebounceConfig,
        'static': StaticConfig,
        'relational': RelationalConfig,
        'temporal': TemporalConfig,
    }
    unknown = set(data) - set(sections) - {'mappings'}
    if unknown:
        raise ConfigError(f"Unknown config sections: {sorted(unknown)}")

    built = {name: _section(cls, name, data.get(name)) for name, cls in sections.items()}

    if built['mediapipe'].max_num_hands != 2:
        raise ConfigError("mediapipe.max_num_hands is fixed at 2")

    mappings = [_section(GestureMapping, 'mappings', item) for item in data.get('mappings') or []]

    return Cfg(mappings=mappings, **built)
