"""
Unit tests for the viser adapters, using a mocked ViserServer.

Tests:
- ViserSceneBackend: geometry records to scene primitives
- ViserMarkerRenderer: flushed batches to scene primitives
- add_display_controls: GUI handles wired to the display
"""

from unittest.mock import MagicMock

import numpy as np
import pytest

from wbtviz.display import WholeBodyTrajectoryDisplay
from wbtviz.frames import StaticTransformProvider
from wbtviz.geometry import AxisAnnotation, PointSamples, Polyline, Ribbon
from wbtviz.plotting.viser import (
    ViserMarkerRenderer,
    ViserSceneBackend,
    add_display_controls,
    compute_grid_size,
    rgba_to_uint8,
)
from wbtviz.primitives import Color, PrimitiveBuffer
from wbtviz.publisher import RealtimePublisher
from wbtviz.spatial import Transform
from wbtviz.style import RenderStyle


def _handle(*args, **kwargs):
    handle = MagicMock()
    handle.value = kwargs.get("initial_value")
    return handle


@pytest.fixture
def server():
    server = MagicMock()
    for method in (
        "add_line_segments",
        "add_point_cloud",
        "add_icosphere",
        "add_frame",
        "add_label",
    ):
        getattr(server.scene, method).side_effect = _handle
    for method in ("add_dropdown", "add_number", "add_rgb", "add_slider", "add_button"):
        getattr(server.gui, method).side_effect = _handle
    return server


def test_rgba_to_uint8():
    np.testing.assert_array_equal(
        rgba_to_uint8(np.array([[0.0, 0.5, 1.0, 0.3], [2.0, -1.0, 0.0, 1.0]])),
        [[0, 128, 255], [255, 0, 0]],
    )


def test_compute_grid_size():
    assert compute_grid_size(np.zeros((0, 3))) == 1.0
    assert compute_grid_size(np.array([[2.0, -3.0, 0.0]])) == pytest.approx(7.2)


class TestViserSceneBackend:
    def test_polyline(self, server):
        backend = ViserSceneBackend(server)
        line = Polyline.from_points([[0, 0, 0], [1, 0, 0], [2, 0, 0]], (1, 0, 0, 1))

        backend.add("/whole_body/base/path", line)

        _, kwargs = server.scene.add_line_segments.call_args
        assert kwargs["points"].shape == (2, 2, 3)
        assert kwargs["colors"].shape == (2, 2, 3)
        assert kwargs["line_width"] == 1.0

    def test_ribbon_width_in_pixels(self, server):
        backend = ViserSceneBackend(server, pixels_per_meter=300.0)
        ribbon = Ribbon.from_points([[0, 0, 0], [1, 0, 0]], (1, 0, 0, 1), line_width=0.01)

        backend.add("ribbon", ribbon)

        _, kwargs = server.scene.add_line_segments.call_args
        assert kwargs["line_width"] == pytest.approx(3.0)

    def test_gap_is_not_bridged(self, server):
        backend = ViserSceneBackend(server)
        line = Polyline.from_points(
            [[0, 0, 0], [1, 0, 0], [5, 0, 0], [6, 0, 0]], (1, 0, 0, 1), step_indices=[0, 1, 4, 5]
        )
        backend.add("line", line)
        _, kwargs = server.scene.add_line_segments.call_args
        assert kwargs["points"].shape == (2, 2, 3)

    def test_segment_colours_follow_segments_across_gap(self, server):
        backend = ViserSceneBackend(server)
        line = Polyline(
            points=np.array([[0, 0, 0], [1, 0, 0], [5, 0, 0], [6, 0, 0]], dtype=float),
            colors=np.array([[1, 0, 0, 1], [0, 1, 0, 1], [0, 0, 1, 1], [1, 1, 1, 1]], dtype=float),
            step_indices=np.array([0, 1, 4, 5]),
        )
        backend.add("line", line)

        kwargs = server.scene.add_line_segments.call_args.kwargs
        np.testing.assert_array_equal(kwargs["points"][1], [[5, 0, 0], [6, 0, 0]])
        np.testing.assert_array_equal(kwargs["colors"][1], [[0, 0, 255], [255, 255, 255]])
        assert kwargs["colors"].shape == kwargs["points"].shape

    def test_point_samples_nest_under_anchor_frames(self, server):
        backend = ViserSceneBackend(server)
        samples = PointSamples(
            points=np.array([[0.1, 0, 0], [0.2, 0, 0]]),
            anchor_positions=np.tile([1.0, 0, 0], (2, 1)),
            anchor_wxyzs=np.tile([1.0, 0, 0, 0], (2, 1)),
            colors=np.tile([0, 0, 1, 0.5], (2, 1)),
            radius=0.02,
            step_indices=np.arange(2),
        )

        group = backend.add("/pts", samples)

        assert server.scene.add_frame.call_count == 2
        assert server.scene.add_icosphere.call_count == 2
        name, = server.scene.add_icosphere.call_args.args
        assert name == "/pts/point_1/sphere"
        assert server.scene.add_icosphere.call_args.kwargs["opacity"] == 0.5

        handles = list(group.handles)
        group.remove()
        for handle in handles:
            handle.remove.assert_called_once()

    def test_axis_annotation(self, server):
        backend = ViserSceneBackend(server)
        annotation = AxisAnnotation(
            position=np.zeros(3), wxyz=np.array([1.0, 0, 0, 0]), scale=2.0, alpha=1.0, step_index=0
        )
        backend.add("/axes/0", annotation)
        kwargs = server.scene.add_frame.call_args.kwargs
        assert kwargs["axes_length"] == pytest.approx(0.08)
        assert kwargs["axes_radius"] == pytest.approx(0.016)

    def test_unsupported_geometry(self, server):
        with pytest.raises(TypeError):
            ViserSceneBackend(server).add("x", object())

    def test_display_drives_backend(self, server, gait_trajectory):
        display = WholeBodyTrajectoryDisplay(backend=ViserSceneBackend(server))
        display.process_message(gait_trajectory)
        assert server.scene.add_icosphere.call_count == 8 + 6 + 8


class TestViserMarkerRenderer:
    def test_render_batch(self, server):
        renderer = ViserMarkerRenderer(server)
        buffer = PrimitiveBuffer(publisher=RealtimePublisher(renderer.render))
        red = Color(1.0, 0.0, 0.0)
        buffer.draw_line([0, 0, 0], [1, 0, 0], 0.01, red)
        buffer.draw_arrow([0, 0, 0], [0, 0, 1], red)
        buffer.draw_point([0, 0, 0], 0.02, red)
        buffer.draw_sphere([0, 0, 0], 0.1, red)
        buffer.draw_text("hi", [0, 0, 1], 0.05, red)

        buffer.flush(stamp=0.0)

        assert server.scene.add_line_segments.call_count == 2
        server.scene.add_point_cloud.assert_called_once()
        assert server.scene.add_icosphere.call_args.kwargs["radius"] == 0.1
        assert server.scene.add_label.call_args.kwargs["text"] == "hi"
        arrow_points = server.scene.add_line_segments.call_args_list[1].kwargs["points"]
        assert arrow_points.shape == (5, 2, 3)

    def test_text_marker_keeps_colour_and_becomes_label(self, server):
        renderer = ViserMarkerRenderer(server)
        buffer = PrimitiveBuffer(publisher=RealtimePublisher(renderer.render))
        buffer.draw_text("com", [0, 0, 1], 0.05, Color(0.2, 0.4, 0.6, 0.5))

        (marker,) = buffer.flush(stamp=0.0)

        assert marker.color == Color(0.2, 0.4, 0.6, 0.5)
        kwargs = server.scene.add_label.call_args.kwargs
        assert kwargs["text"] == "com"
        np.testing.assert_allclose(kwargs["position"], [0, 0, 1])

    def test_cone_has_no_shaft(self, server):
        renderer = ViserMarkerRenderer(server)
        buffer = PrimitiveBuffer()
        buffer.draw_cone([0, 0, 0], [0, 0, 1], 0.5, 0.1, Color(1.0, 1.0, 1.0))
        renderer.render(buffer.flush(stamp=0.0))
        assert server.scene.add_line_segments.call_args.kwargs["points"].shape == (4, 2, 3)

    def test_next_batch_replaces_previous(self, server):
        renderer = ViserMarkerRenderer(server)
        buffer = PrimitiveBuffer()
        buffer.draw_sphere([0, 0, 0], 0.1, Color(1.0, 1.0, 1.0))
        renderer.render(buffer.flush(stamp=0.0))
        first_handles = list(renderer._handles)

        renderer.render(buffer.flush(stamp=0.1))

        for handle in first_handles:
            handle.remove.assert_called_once()
        assert renderer._handles == []

    def test_markers_are_grouped_by_frame(self, server):
        provider = StaticTransformProvider(
            fixed_frame="map", transforms={"odom": Transform(position=[0, 0, 1])}
        )
        renderer = ViserMarkerRenderer(server, provider=provider)
        buffer = PrimitiveBuffer()
        buffer.draw_sphere([0, 0, 0], 0.1, Color(1.0, 1.0, 1.0), frame="odom")
        buffer.draw_sphere([1, 0, 0], 0.1, Color(1.0, 1.0, 1.0), frame="odom")

        renderer.render(buffer.flush(stamp=0.0))

        server.scene.add_frame.assert_called_once()
        name = server.scene.add_frame.call_args.args[0]
        assert name == "/markers/odom"
        np.testing.assert_allclose(server.scene.add_frame.call_args.kwargs["position"], [0, 0, 1])
        names = [c.args[0] for c in server.scene.add_icosphere.call_args_list]
        assert names == ["/markers/odom/dls_0", "/markers/odom/dls_1"]


class TestDisplayControls:
    @pytest.fixture
    def display(self):
        return WholeBodyTrajectoryDisplay()

    def test_initial_values_follow_config(self, server, display):
        controls = add_display_controls(server, display)
        assert controls["base"]["style"].value == "points"
        assert controls["base"]["line_width"].value == 0.01
        assert controls["base"]["color"].value == (0, 85, 255)
        assert "axes_scale" not in controls["contact"]

    def test_style_dropdown(self, server, display, gait_trajectory):
        controls = add_display_controls(server, display)
        display.process_message(gait_trajectory)

        dropdown = controls["contact"]["style"]
        dropdown.value = "ribbon"
        callback = dropdown.on_update.call_args.args[0]
        callback(None)

        assert display.contact_style is RenderStyle.RIBBON

    def test_numeric_and_colour_controls(self, server, display):
        controls = add_display_controls(server, display)

        controls["base"]["axes_scale"].value = 3.0
        controls["base"]["axes_scale"].on_update.call_args.args[0](None)
        controls["contact"]["color"].value = (255, 0, 0)
        controls["contact"]["color"].on_update.call_args.args[0](None)

        assert display.config.base.axes_scale == 3.0
        assert display.config.contact.color == (1.0, 0.0, 0.0)

    def test_reset_button(self, server, display, gait_trajectory):
        controls = add_display_controls(server, display)
        display.process_message(gait_trajectory)

        controls["reset"].on_click.call_args.args[0](None)

        assert display.trajectory is None
        assert len(display.arena) == 0


if __name__ == "__main__":
    pytest.main([__file__])
