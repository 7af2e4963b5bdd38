import dataclasses
from dataclasses import dataclass, field
from typing import Tuple, Union

import numpy as np

from .style import RenderStyle

MIN_LINE_WIDTH = 0.001
DEFAULT_COLOR = (0.0, 85.0 / 255.0, 1.0)


def _validate_color(color) -> Tuple[float, float, float]:
    rgb = np.asarray(color, dtype=float).reshape(-1)
    if rgb.shape != (3,):
        raise ValueError(f"color must have exactly 3 components (r, g, b), got {rgb.shape[0]}")
    if not np.all(np.isfinite(rgb)):
        raise ValueError(f"color components must be finite, got {tuple(rgb)}")
    return tuple(float(c) for c in np.clip(rgb, 0.0, 1.0))


def _validate_finite(name: str, value) -> float:
    value = float(value)
    if not np.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    return value


@dataclass
class TrajectoryStyleConfig:
    """
    Appearance settings shared by the base and contact trajectories.

    Out-of-range values are clamped the same way the property panel clamps
    them: the line width never drops below 0.001 m and colour channels and
    alpha stay within [0, 1].

    Args:
        style (RenderStyle | str): Rendering encoding, one of "polyline", "ribbon" or "points". Defaults to "points".
        line_width (float): Width in meters of ribbons and radius of point samples. Ignored by polylines. Defaults to 0.01.
        color (tuple): RGB colour with channels in [0, 1]. Defaults to (0, 85, 255) / 255.
        alpha (float): Opacity in [0, 1]. Defaults to 1.0.
    """

    style: Union[RenderStyle, str] = RenderStyle.POINT_SAMPLES
    line_width: float = 0.01
    color: Tuple[float, float, float] = DEFAULT_COLOR
    alpha: float = 1.0

    def __post_init__(self):
        self.style = RenderStyle.parse(self.style)
        self.line_width = max(_validate_finite("line_width", self.line_width), MIN_LINE_WIDTH)
        self.color = _validate_color(self.color)
        self.alpha = float(np.clip(_validate_finite("alpha", self.alpha), 0.0, 1.0))

    @property
    def rgba(self) -> Tuple[float, float, float, float]:
        return (*self.color, self.alpha)

    def replace(self, **changes):
        """Return a validated copy with ``changes`` applied."""
        return dataclasses.replace(self, **changes)


@dataclass
class BaseTrajectoryConfig(TrajectoryStyleConfig):
    """
    Appearance of the base trajectory.

    Args:
        axes_scale (float): Scale of the orientation frames drawn along the path. Also sets how far apart they are placed. Defaults to 1.0.
    """

    axes_scale: float = 1.0

    def __post_init__(self):
        super().__post_init__()
        self.axes_scale = float(self.axes_scale)
        if not np.isfinite(self.axes_scale) or self.axes_scale < 0.0:
            raise ValueError(f"axes_scale must be a finite, non-negative number, got {self.axes_scale}")


@dataclass
class ContactTrajectoryConfig(TrajectoryStyleConfig):
    """Appearance of the end-effector (contact) trajectories."""


@dataclass
class DevConfig:
    """
    Development settings.

    Args:
        printing (bool): Print a coloured summary after each processed trajectory. Defaults to False.
    """

    printing: bool = False


@dataclass
class DisplayConfig:
    """
    Top-level configuration of a whole-body trajectory display.

    Args:
        base (BaseTrajectoryConfig): Base trajectory appearance.
        contact (ContactTrajectoryConfig): Contact trajectory appearance.
        dev (DevConfig): Development settings.
    """

    base: BaseTrajectoryConfig = field(default_factory=BaseTrajectoryConfig)
    contact: ContactTrajectoryConfig = field(default_factory=ContactTrajectoryConfig)
    dev: DevConfig = field(default_factory=DevConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "DisplayConfig":
        """Build a configuration from plain dictionaries (e.g. parsed JSON)."""
        return cls(
            base=BaseTrajectoryConfig(**data.get("base", {})),
            contact=ContactTrajectoryConfig(**data.get("contact", {})),
            dev=DevConfig(**data.get("dev", {})),
        )
