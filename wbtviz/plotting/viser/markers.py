"""Render flushed primitive batches into a viser scene.

Each call to :meth:`ViserMarkerRenderer.render` replaces the previous batch.
Markers are grouped under one node per reference frame; that node carries the
frame's transform into the fixed frame, resolved through the provider.

Text markers become viser labels. Labels have no colour of their own in viser,
so the marker's RGBA is kept on the batch but not shown for text.
"""

import warnings

import numpy as np
import viser

from wbtviz.errors import FrameTransformWarning
from wbtviz.frames import FrameTransformProvider
from wbtviz.primitives import Marker, MarkerArray, MarkerType
from wbtviz.spatial import quaternion_from_two_vectors, rotate_vector_by_quaternion

from .scene import rgba_to_uint8

_HEAD_BARBS = 4


def _arrow_segments(marker: Marker) -> np.ndarray:
    """Shaft plus head barbs of an arrow marker, shape (1 + 4, 2, 3)."""
    begin, end = marker.points
    direction = end - begin
    length = float(np.linalg.norm(direction))
    if length < 1e-9:
        return np.zeros((0, 2, 3))
    head_length = min(float(marker.scale[2]) or 0.3 * length, length)
    head_radius = 0.5 * float(marker.scale[1])
    q = quaternion_from_two_vectors([0.0, 0.0, 1.0], direction)
    segments = []
    if marker.scale[0] > 0.0:
        segments.append([begin, end])
    base = end - direction / length * head_length
    for k in range(_HEAD_BARBS):
        angle = 2.0 * np.pi * k / _HEAD_BARBS
        offset = rotate_vector_by_quaternion(
            np.array([np.cos(angle), np.sin(angle), 0.0]) * head_radius, q
        )
        segments.append([base + offset, end])
    return np.array(segments)


class ViserMarkerRenderer:
    """Publishes :class:`MarkerArray` batches to a viser scene.

    Args:
        server: ViserServer instance
        provider: Optional frame provider used to place each marker frame
        root: Scene-graph prefix for the batch
        pixels_per_meter: Conversion from marker line widths (meters) to pixels
    """

    def __init__(
        self,
        server: viser.ViserServer,
        provider: FrameTransformProvider | None = None,
        root: str = "/markers",
        pixels_per_meter: float = 300.0,
    ):
        self.server = server
        self.provider = provider
        self.root = root.rstrip("/")
        self.pixels_per_meter = pixels_per_meter
        self._handles: list = []

    def clear(self) -> None:
        for handle in reversed(self._handles):
            handle.remove()
        self._handles = []

    def render(self, batch: MarkerArray) -> None:
        """Replace whatever was previously shown with ``batch``."""
        self.clear()
        frames = {}
        for marker in batch:
            if marker.frame_id not in frames:
                frames[marker.frame_id] = self._add_frame_node(marker)
            node = frames[marker.frame_id]
            handle = self._add_marker(f"{node}/{marker.ns}_{marker.id}", marker)
            if handle is not None:
                self._handles.append(handle)

    def _add_frame_node(self, marker: Marker) -> str:
        name = f"{self.root}/{marker.frame_id.strip('/') or 'world'}"
        wxyz, position = (1.0, 0.0, 0.0, 0.0), (0.0, 0.0, 0.0)
        if self.provider is not None:
            ok, transform = self.provider.resolve(marker.frame_id, marker.stamp)
            if not ok:
                warnings.warn(
                    f"Error transforming from frame '{marker.frame_id}' to frame "
                    f"'{self.provider.fixed_frame}'",
                    FrameTransformWarning,
                )
            wxyz, position = transform.wxyz, transform.position
        self._handles.append(
            self.server.scene.add_frame(name, show_axes=False, wxyz=wxyz, position=position)
        )
        return name

    def _add_marker(self, name: str, marker: Marker):
        rgb = tuple(int(c) for c in rgba_to_uint8(np.array(marker.color)))
        if marker.type is MarkerType.LINE_LIST:
            return self.server.scene.add_line_segments(
                name,
                points=np.array([marker.points]),
                colors=rgb,
                line_width=max(float(marker.scale[0]) * self.pixels_per_meter, 1.0),
            )
        if marker.type is MarkerType.ARROW:
            segments = _arrow_segments(marker)
            if len(segments) == 0:
                return None
            return self.server.scene.add_line_segments(
                name,
                points=segments,
                colors=rgb,
                line_width=max(float(marker.scale[0]) * self.pixels_per_meter, 1.0),
            )
        if marker.type is MarkerType.POINTS:
            return self.server.scene.add_point_cloud(
                name,
                points=np.array(marker.points, dtype=np.float32),
                colors=rgb,
                point_size=float(marker.scale[0]),
            )
        if marker.type is MarkerType.SPHERE:
            return self.server.scene.add_icosphere(
                name,
                radius=float(marker.scale[0]),
                color=rgb,
                opacity=float(marker.color.a),
                position=marker.position,
            )
        return self.server.scene.add_label(name, text=marker.text, position=marker.position)
