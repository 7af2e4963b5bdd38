"""Ad-hoc drawing buffer.

:class:`PrimitiveBuffer` collects typed draw requests (lines, arrows, points,
spheres, text) during one update cycle and flushes them as a single
:class:`MarkerArray`. Requests with any non-finite numeric field are dropped
at admission; visualization is best-effort and a bad sample must not stop the
caller.

Example:
    ```python
    buffer = PrimitiveBuffer(publisher=RealtimePublisher(renderer.render))
    buffer.draw_line([0, 0, 0], [1, 0, 0], 0.01, Color(1.0, 0.0, 0.0))
    buffer.draw_text("start", [0, 0, 0.2], 0.05, Color(1.0, 1.0, 1.0))
    batch = buffer.flush(stamp=time.time())
    ```
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Union

import numpy as np

from .publisher import RealtimePublisher
from .spatial import (
    IDENTITY_WXYZ,
    all_finite,
    quaternion_from_two_vectors,
    rotate_vector_by_quaternion,
)

MARKER_NAMESPACE = "dls"
MARKER_LIFETIME = 0.035  # seconds; stale batches vanish if no new flush arrives


class Color(NamedTuple):
    """RGBA colour with channels in [0, 1]."""

    r: float
    g: float
    b: float
    a: float = 1.0


class DrawType(Enum):
    LINE = "line"
    ARROW = "arrow"
    POINT = "point"
    SPHERE = "sphere"
    TEXT = "text"


class MarkerType(Enum):
    LINE_LIST = "line_list"
    ARROW = "arrow"
    POINTS = "points"
    SPHERE = "sphere"
    TEXT_VIEW_FACING = "text_view_facing"


@dataclass(frozen=True)
class ArrowProperties:
    """Arrow dimensions: shaft diameter, head diameter and head length."""

    shaft_diameter: float
    head_diameter: float
    head_length: float

    @classmethod
    def from_length(cls, length: float) -> "ArrowProperties":
        """Proportions used when only the arrow length is known."""
        return cls(0.1 * length, 0.2 * length, 0.3 * length)


@dataclass(eq=False)
class DrawRequest:
    """A single queued primitive.

    ``p1``/``p2`` are the segment endpoints for lines and arrows; for points,
    spheres and text only ``p1`` (the position) is meaningful.
    """

    type: DrawType
    p1: np.ndarray
    p2: np.ndarray = field(default_factory=lambda: np.zeros(3))
    scale: np.ndarray = field(default_factory=lambda: np.zeros(3))
    color: Color = Color(1.0, 1.0, 1.0, 1.0)
    frame: str = "world"
    text: str = ""

    def __post_init__(self):
        self.p1 = np.asarray(self.p1, dtype=float).reshape(3)
        self.p2 = np.asarray(self.p2, dtype=float).reshape(3)
        self.scale = np.asarray(self.scale, dtype=float).reshape(3)
        self.color = Color(*(float(c) for c in self.color))

    def is_finite(self) -> bool:
        return all_finite(self.p1, self.p2, self.scale, tuple(self.color))


@dataclass(eq=False)
class Marker:
    """One renderable item of a flushed batch."""

    type: MarkerType
    id: int
    frame_id: str
    stamp: float
    color: Color
    scale: np.ndarray
    ns: str = MARKER_NAMESPACE
    lifetime: float = MARKER_LIFETIME
    points: List[np.ndarray] = field(default_factory=list)
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    wxyz: np.ndarray = field(default_factory=lambda: IDENTITY_WXYZ.copy())
    text: str = ""


@dataclass
class MarkerArray:
    markers: List[Marker] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.markers)

    def __iter__(self):
        return iter(self.markers)


def _to_marker(request: DrawRequest, marker_id: int, stamp: float) -> Marker:
    marker = Marker(
        type=MarkerType.LINE_LIST,
        id=marker_id,
        frame_id=request.frame,
        stamp=stamp,
        color=request.color,
        scale=request.scale.copy(),
    )
    if request.type is DrawType.LINE:
        marker.points = [request.p1.copy(), request.p2.copy()]
    elif request.type is DrawType.ARROW:
        marker.type = MarkerType.ARROW
        marker.points = [request.p1.copy(), request.p2.copy()]
    elif request.type is DrawType.POINT:
        marker.type = MarkerType.POINTS
        marker.points = [request.p1.copy()]
    elif request.type is DrawType.SPHERE:
        marker.type = MarkerType.SPHERE
        marker.position = request.p1.copy()
    else:
        marker.type = MarkerType.TEXT_VIEW_FACING
        marker.position = request.p1.copy()
        marker.text = request.text
    return marker


class PrimitiveBuffer:
    """Per-cycle queue of draw requests, flushed atomically into one batch.

    Args:
        publisher: Optional publisher receiving each flushed batch. A busy
            publisher drops the batch; the next cycle supersedes it.
        default_frame: Frame used when a draw call does not name one
    """

    def __init__(
        self,
        publisher: Optional[RealtimePublisher] = None,
        default_frame: str = "world",
    ):
        self.publisher = publisher
        self.default_frame = default_frame
        self._queue: List[DrawRequest] = []

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def requests(self) -> tuple:
        return tuple(self._queue)

    def enqueue(self, request: DrawRequest) -> bool:
        """Queue ``request`` if all of its numeric fields are finite.

        Returns:
            True if the request was admitted
        """
        if not request.is_finite():
            return False
        self._queue.append(request)
        return True

    def clear(self) -> None:
        self._queue.clear()

    def flush(self, stamp: float) -> MarkerArray:
        """Convert the queue into one batch, clear it and try to publish.

        Args:
            stamp: Time stamp applied to every marker of the batch

        Returns:
            The flushed batch, whether or not it could be published
        """
        batch = MarkerArray([_to_marker(r, i, stamp) for i, r in enumerate(self._queue)])
        self._queue.clear()
        if self.publisher is not None:
            self.publisher.try_publish(batch)
        return batch

    # -------------------------------------------------------------------------
    # Drawing helpers
    # -------------------------------------------------------------------------

    def _frame(self, frame: Optional[str]) -> str:
        return frame if frame else self.default_frame

    def draw_line(
        self,
        point1: Sequence[float],
        point2: Sequence[float],
        width: float,
        color: Color,
        frame: Optional[str] = None,
    ) -> bool:
        return self.enqueue(
            DrawRequest(
                DrawType.LINE,
                p1=point1,
                p2=point2,
                scale=(width, 0.0, 0.0),
                color=color,
                frame=self._frame(frame),
            )
        )

    def draw_point(
        self,
        position: Sequence[float],
        size: float,
        color: Color,
        frame: Optional[str] = None,
    ) -> bool:
        return self.enqueue(
            DrawRequest(
                DrawType.POINT,
                p1=position,
                scale=(size, size, size),
                color=color,
                frame=self._frame(frame),
            )
        )

    def draw_sphere(
        self,
        position: Sequence[float],
        radius: float,
        color: Color,
        frame: Optional[str] = None,
    ) -> bool:
        return self.enqueue(
            DrawRequest(
                DrawType.SPHERE,
                p1=position,
                scale=(radius, radius, radius),
                color=color,
                frame=self._frame(frame),
            )
        )

    def draw_arrow(
        self,
        begin: Sequence[float],
        end: Sequence[float],
        color: Color,
        frame: Optional[str] = None,
        arrow: Optional[ArrowProperties] = None,
    ) -> bool:
        """Queue an arrow from ``begin`` to ``end``.

        When ``arrow`` is omitted the dimensions are derived from the length.
        """
        begin = np.asarray(begin, dtype=float)
        end = np.asarray(end, dtype=float)
        if arrow is None:
            arrow = ArrowProperties.from_length(float(np.linalg.norm(end - begin)))
        return self.enqueue(
            DrawRequest(
                DrawType.ARROW,
                p1=begin,
                p2=end,
                scale=(arrow.shaft_diameter, arrow.head_diameter, arrow.head_length),
                color=color,
                frame=self._frame(frame),
            )
        )

    def draw_arrow_along(
        self,
        origin: Sequence[float],
        direction: Sequence[float],
        length: float,
        color: Color,
        frame: Optional[str] = None,
        arrow: Optional[ArrowProperties] = None,
    ) -> bool:
        """Queue an arrow of ``length`` starting at ``origin`` along ``direction``."""
        origin = np.asarray(origin, dtype=float)
        direction = np.asarray(direction, dtype=float)
        with np.errstate(invalid="ignore", divide="ignore"):
            end = origin + length * direction / np.linalg.norm(direction)
        if arrow is None:
            arrow = ArrowProperties.from_length(length)
        return self.draw_arrow(origin, end, color, frame, arrow)

    def draw_arrow_oriented(
        self,
        origin: Sequence[float],
        wxyz: Sequence[float],
        length: float,
        color: Color,
        frame: Optional[str] = None,
        arrow: Optional[ArrowProperties] = None,
    ) -> bool:
        """Queue an arrow along the +Z axis of the frame rotated by ``wxyz``."""
        origin = np.asarray(origin, dtype=float)
        end = origin + rotate_vector_by_quaternion(np.array([0.0, 0.0, length]), wxyz)
        if arrow is None:
            arrow = ArrowProperties.from_length(length)
        return self.draw_arrow(origin, end, color, frame, arrow)

    def draw_cone(
        self,
        vertex: Sequence[float],
        orientation: Union[Sequence[float], np.ndarray],
        height: float,
        radius: float,
        color: Color,
        frame: Optional[str] = None,
    ) -> bool:
        """Queue a cone with its apex at ``vertex``.

        Args:
            orientation: Either a quaternion (4,) in wxyz format, or a
                direction (3,) the cone axis points along
        """
        orientation = np.asarray(orientation, dtype=float)
        if orientation.shape == (3,):
            if not all_finite(orientation) or np.linalg.norm(orientation) == 0.0:
                return False
            orientation = quaternion_from_two_vectors([0.0, 0.0, 1.0], orientation)
        vertex = np.asarray(vertex, dtype=float)
        axis = rotate_vector_by_quaternion(np.array([0.0, 0.0, height]), orientation)
        # Drawn as an arrow with no shaft, pointing back at the apex
        return self.enqueue(
            DrawRequest(
                DrawType.ARROW,
                p1=vertex + axis,
                p2=vertex,
                scale=(0.0, 2.0 * radius, height),
                color=color,
                frame=self._frame(frame),
            )
        )

    def draw_text(
        self,
        text: str,
        position: Sequence[float],
        uppercase_height: float,
        color: Color,
        frame: Optional[str] = None,
    ) -> bool:
        return self.enqueue(
            DrawRequest(
                DrawType.TEXT,
                p1=position,
                scale=(0.0, 0.0, uppercase_height),
                color=color,
                frame=self._frame(frame),
                text=text,
            )
        )
