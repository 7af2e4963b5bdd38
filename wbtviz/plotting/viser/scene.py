"""Viser scene backend for the trajectory geometry.

Maps each geometry record onto viser scene primitives:

- ``Polyline``: thin line segments between adjacent steps
- ``Ribbon``: line segments with a width derived from ``line_width``
  (viser draws wide lines as screen-facing bands)
- ``PointSamples``: one icosphere per sample, nested under an invisible
  frame carrying that sample's anchor transform
- ``AxisAnnotation``: a coordinate frame
"""

import numpy as np
import viser

from wbtviz.geometry import AxisAnnotation, Geometry, PointSamples, Polyline, Ribbon


def rgba_to_uint8(colors: np.ndarray) -> np.ndarray:
    """Convert float RGB(A) colours in [0, 1] to uint8 RGB."""
    colors = np.asarray(colors, dtype=float)
    return (np.clip(colors[..., :3], 0.0, 1.0) * 255).round().astype(np.uint8)


class HandleGroup:
    """Several viser handles removed together."""

    def __init__(self, handles: list):
        self.handles = handles

    def remove(self) -> None:
        for handle in reversed(self.handles):
            handle.remove()
        self.handles = []


class ViserSceneBackend:
    """Materialises geometry records in a viser scene.

    Args:
        server: ViserServer instance
        polyline_width: Pixel width of polylines
        pixels_per_meter: Conversion from a ribbon's ``line_width`` (meters)
            to viser's pixel line width
    """

    def __init__(
        self,
        server: viser.ViserServer,
        polyline_width: float = 1.0,
        pixels_per_meter: float = 300.0,
    ):
        self.server = server
        self.polyline_width = polyline_width
        self.pixels_per_meter = pixels_per_meter

    def add(self, name: str, geometry: Geometry):
        if isinstance(geometry, Ribbon):
            return self._add_strip(
                name, geometry, max(geometry.line_width * self.pixels_per_meter, 1.0)
            )
        if isinstance(geometry, Polyline):
            return self._add_strip(name, geometry, self.polyline_width)
        if isinstance(geometry, PointSamples):
            return self._add_point_samples(name, geometry)
        if isinstance(geometry, AxisAnnotation):
            return self._add_axes(name, geometry)
        raise TypeError(f"Unsupported geometry type: {type(geometry).__name__}")

    def _add_strip(self, name: str, geometry, line_width: float):
        segments = geometry.segments()
        return self.server.scene.add_line_segments(
            name,
            points=segments.astype(np.float32),
            colors=rgba_to_uint8(geometry.segment_colors()),
            line_width=line_width,
        )

    def _add_point_samples(self, name: str, geometry: PointSamples) -> HandleGroup:
        handles = []
        for i in range(len(geometry)):
            anchor = self.server.scene.add_frame(
                f"{name}/point_{i}",
                show_axes=False,
                wxyz=geometry.anchor_wxyzs[i],
                position=geometry.anchor_positions[i],
            )
            sphere = self.server.scene.add_icosphere(
                f"{name}/point_{i}/sphere",
                radius=geometry.radius,
                color=tuple(int(c) for c in rgba_to_uint8(geometry.colors[i])),
                opacity=float(geometry.colors[i][3]),
                position=geometry.points[i],
            )
            handles.extend([anchor, sphere])
        return HandleGroup(handles)

    def _add_axes(self, name: str, annotation: AxisAnnotation):
        return self.server.scene.add_frame(
            name,
            wxyz=annotation.wxyz,
            position=annotation.position,
            axes_length=annotation.axes_length,
            axes_radius=annotation.axes_radius,
        )
