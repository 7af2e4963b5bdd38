# Core trajectory model
from wbtviz.trajectory import (
    BaseAxis,
    BaseState,
    ContactState,
    Trajectory,
    TrajectoryStep,
    load_trajectory,
    save_trajectory,
)

# Frames and transforms
from wbtviz.frames import FrameTransformProvider, StaticTransformProvider
from wbtviz.spatial import Transform

# Immediate-mode drawing
from wbtviz.primitives import (
    ArrowProperties,
    Color,
    DrawType,
    MarkerArray,
    PrimitiveBuffer,
)
from wbtviz.publisher import RealtimePublisher

# Retained-mode trajectory display
from wbtviz.config import (
    BaseTrajectoryConfig,
    ContactTrajectoryConfig,
    DevConfig,
    DisplayConfig,
)
from wbtviz.display import WholeBodyTrajectoryDisplay
from wbtviz.style import RenderStyle, StyleDispatcher

from wbtviz.errors import (
    EmptyTrajectoryWarning,
    FrameTransformWarning,
    NonFiniteStateWarning,
    WbtvizWarning,
)

__all__ = [
    "BaseAxis",
    "BaseState",
    "ContactState",
    "Trajectory",
    "TrajectoryStep",
    "load_trajectory",
    "save_trajectory",
    "FrameTransformProvider",
    "StaticTransformProvider",
    "Transform",
    "ArrowProperties",
    "Color",
    "DrawType",
    "MarkerArray",
    "PrimitiveBuffer",
    "RealtimePublisher",
    "BaseTrajectoryConfig",
    "ContactTrajectoryConfig",
    "DevConfig",
    "DisplayConfig",
    "WholeBodyTrajectoryDisplay",
    "RenderStyle",
    "StyleDispatcher",
    "WbtvizWarning",
    "NonFiniteStateWarning",
    "FrameTransformWarning",
    "EmptyTrajectoryWarning",
]
