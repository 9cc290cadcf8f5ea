"""
Configuration management for hand gesture recognition system.
"""
import math
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, field


class ConfigError(ValueError):
    """Raised when configuration values are outside their valid ranges."""


@dataclass
class FilterNoise:
    """Process / measurement noise pair for a recursive filter."""
    process_noise: float
    measurement_noise: float


@dataclass
class SmootherConfig:
    """Landmark smoothing configuration (per axis family)."""
    xy: FilterNoise = field(default_factory=lambda: FilterNoise(0.001, 0.05))
    z: FilterNoise = field(default_factory=lambda: FilterNoise(0.001, 0.1))


@dataclass
class FeatureConfig:
    """Geometric feature extraction thresholds."""
    curl_threshold: float = 2.3  # radians, ~132 degrees
    thumb_extension_ratio: float = 0.85


@dataclass
class ClassifierConfig:
    """Gesture rule thresholds and fixed confidences."""
    pinch_threshold: float = 0.45
    pinch_confidence_span: float = 0.3
    point_confidence: float = 0.9
    open_confidence: float = 0.85
    open_min_fingers: int = 3
    fist_confidence: float = 0.8


@dataclass
class StabilizerConfig:
    """Frame debouncing configuration."""
    entry_frames: int = 4
    exit_frames: int = 3


@dataclass
class ControlsConfig:
    """Zoom, position and swipe mapping configuration."""
    zoom_sensitivity: float = 15.0
    zoom_epsilon: float = 0.002
    zoom_filter: FilterNoise = field(default_factory=lambda: FilterNoise(0.001, 0.01))
    position_filter: FilterNoise = field(default_factory=lambda: FilterNoise(0.002, 0.03))
    swipe_window: int = 5
    swipe_velocity_threshold: float = 0.6
    swipe_cooldown_ms: int = 600
    min_velocity_dt_s: float = 0.01
    zoom_min: float = 0.5
    zoom_max: float = 3.0


@dataclass
class Cfg:
    """Main configuration class."""
    smoother: SmootherConfig = field(default_factory=SmootherConfig)
    features: FeatureConfig = field(default_factory=FeatureConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    stabilizer: StabilizerConfig = field(default_factory=StabilizerConfig)
    controls: ControlsConfig = field(default_factory=ControlsConfig)


DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.default.yaml"


def default_config() -> Cfg:
    """Return the built-in defaults without reading any file."""
    return Cfg()


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses the packaged config.default.yaml

    Returns:
        Validated configuration object. Keys missing from the file keep their defaults.

    Raises:
        FileNotFoundError: If the config file does not exist
        ConfigError: If a value is outside its valid range
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    try:
        cfg = _dict_to_config(data)
    except ConfigError:
        raise
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value in {config_path}: {e}") from e
    validate_config(cfg)
    return cfg


def _noise(data: Dict[str, Any], default: FilterNoise) -> FilterNoise:
    return FilterNoise(
        process_noise=float(data.get('process_noise', default.process_noise)),
        measurement_noise=float(data.get('measurement_noise', default.measurement_noise))
    )


def _section(data: Dict[str, Any], key: str, path: str = "") -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{path}{key}' must be a mapping, got {type(value).__name__}")
    return value


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    defaults = Cfg()

    smoother_data = _section(data, 'smoother')
    smoother = SmootherConfig(
        xy=_noise(_section(smoother_data, 'xy', 'smoother.'), defaults.smoother.xy),
        z=_noise(_section(smoother_data, 'z', 'smoother.'), defaults.smoother.z)
    )

    features_data = _section(data, 'features')
    features = FeatureConfig(
        curl_threshold=float(features_data.get('curl_threshold', defaults.features.curl_threshold)),
        thumb_extension_ratio=float(features_data.get('thumb_extension_ratio', defaults.features.thumb_extension_ratio))
    )

    clf_data = _section(data, 'classifier')
    clf_defaults = defaults.classifier
    classifier = ClassifierConfig(
        pinch_threshold=float(clf_data.get('pinch_threshold', clf_defaults.pinch_threshold)),
        pinch_confidence_span=float(clf_data.get('pinch_confidence_span', clf_defaults.pinch_confidence_span)),
        point_confidence=float(clf_data.get('point_confidence', clf_defaults.point_confidence)),
        open_confidence=float(clf_data.get('open_confidence', clf_defaults.open_confidence)),
        open_min_fingers=int(clf_data.get('open_min_fingers', clf_defaults.open_min_fingers)),
        fist_confidence=float(clf_data.get('fist_confidence', clf_defaults.fist_confidence))
    )

    stab_data = _section(data, 'stabilizer')
    stabilizer = StabilizerConfig(
        entry_frames=int(stab_data.get('entry_frames', defaults.stabilizer.entry_frames)),
        exit_frames=int(stab_data.get('exit_frames', defaults.stabilizer.exit_frames))
    )

    ctl_data = _section(data, 'controls')
    ctl_defaults = defaults.controls
    controls = ControlsConfig(
        zoom_sensitivity=float(ctl_data.get('zoom_sensitivity', ctl_defaults.zoom_sensitivity)),
        zoom_epsilon=float(ctl_data.get('zoom_epsilon', ctl_defaults.zoom_epsilon)),
        zoom_filter=_noise(_section(ctl_data, 'zoom_filter', 'controls.'), ctl_defaults.zoom_filter),
        position_filter=_noise(_section(ctl_data, 'position_filter', 'controls.'), ctl_defaults.position_filter),
        swipe_window=int(ctl_data.get('swipe_window', ctl_defaults.swipe_window)),
        swipe_velocity_threshold=float(ctl_data.get('swipe_velocity_threshold', ctl_defaults.swipe_velocity_threshold)),
        swipe_cooldown_ms=int(ctl_data.get('swipe_cooldown_ms', ctl_defaults.swipe_cooldown_ms)),
        min_velocity_dt_s=float(ctl_data.get('min_velocity_dt_s', ctl_defaults.min_velocity_dt_s)),
        zoom_min=float(ctl_data.get('zoom_min', ctl_defaults.zoom_min)),
        zoom_max=float(ctl_data.get('zoom_max', ctl_defaults.zoom_max))
    )

    return Cfg(
        smoother=smoother,
        features=features,
        classifier=classifier,
        stabilizer=stabilizer,
        controls=controls
    )


def _check(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def _check_noise(name: str, noise: FilterNoise) -> None:
    _check(noise.process_noise > 0, f"{name}.process_noise must be > 0, got {noise.process_noise}")
    _check(noise.measurement_noise > 0, f"{name}.measurement_noise must be > 0, got {noise.measurement_noise}")


def validate_config(cfg: Cfg) -> Cfg:
    """
    Reject configuration values outside their sane ranges.

    Raises:
        ConfigError: On the first invalid value found
    """
    _check_noise("smoother.xy", cfg.smoother.xy)
    _check_noise("smoother.z", cfg.smoother.z)

    f = cfg.features
    _check(0 < f.curl_threshold <= math.pi, f"features.curl_threshold must be in (0, pi], got {f.curl_threshold}")
    _check(f.thumb_extension_ratio > 0, f"features.thumb_extension_ratio must be > 0, got {f.thumb_extension_ratio}")

    c = cfg.classifier
    _check(c.pinch_threshold > 0, f"classifier.pinch_threshold must be > 0, got {c.pinch_threshold}")
    _check(c.pinch_confidence_span > 0, f"classifier.pinch_confidence_span must be > 0, got {c.pinch_confidence_span}")
    for name in ("point_confidence", "open_confidence", "fist_confidence"):
        value = getattr(c, name)
        _check(0.0 <= value <= 1.0, f"classifier.{name} must be in [0, 1], got {value}")
    _check(1 <= c.open_min_fingers <= 4, f"classifier.open_min_fingers must be in 1..4, got {c.open_min_fingers}")

    s = cfg.stabilizer
    _check(s.entry_frames >= 1, f"stabilizer.entry_frames must be >= 1, got {s.entry_frames}")
    _check(s.exit_frames >= 1, f"stabilizer.exit_frames must be >= 1, got {s.exit_frames}")

    ctl = cfg.controls
    _check(ctl.zoom_sensitivity > 0, f"controls.zoom_sensitivity must be > 0, got {ctl.zoom_sensitivity}")
    _check(ctl.zoom_epsilon >= 0, f"controls.zoom_epsilon must be >= 0, got {ctl.zoom_epsilon}")
    _check_noise("controls.zoom_filter", ctl.zoom_filter)
    _check_noise("controls.position_filter", ctl.position_filter)
    _check(ctl.swipe_window >= 2, f"controls.swipe_window must be >= 2, got {ctl.swipe_window}")
    _check(ctl.swipe_velocity_threshold > 0,
           f"controls.swipe_velocity_threshold must be > 0, got {ctl.swipe_velocity_threshold}")
    _check(ctl.swipe_cooldown_ms >= 0, f"controls.swipe_cooldown_ms must be >= 0, got {ctl.swipe_cooldown_ms}")
    _check(ctl.min_velocity_dt_s >= 0, f"controls.min_velocity_dt_s must be >= 0, got {ctl.min_velocity_dt_s}")
    _check(ctl.zoom_min < ctl.zoom_max,
           f"controls.zoom_min ({ctl.zoom_min}) must be below controls.zoom_max ({ctl.zoom_max})")

    return cfg
