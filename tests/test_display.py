"""
Integration tests for the whole-body trajectory display.

Tests the event methods of WholeBodyTrajectoryDisplay against an in-memory
arena and a mocked scene backend.
"""

import warnings
from unittest.mock import Mock

import numpy as np
import pytest

from wbtviz.config import BaseTrajectoryConfig, ContactTrajectoryConfig, DevConfig, DisplayConfig
from wbtviz.display import WholeBodyTrajectoryDisplay
from wbtviz.errors import EmptyTrajectoryWarning, FrameTransformWarning
from wbtviz.frames import StaticTransformProvider
from wbtviz.geometry import AxisAnnotation, PointSamples, Polyline, Ribbon
from wbtviz.scene import TrajectoryKind
from wbtviz.spatial import Transform
from wbtviz.style import RenderStyle
from wbtviz.trajectory import BaseState, Trajectory, TrajectoryStep


@pytest.fixture
def backend():
    backend = Mock()
    backend.add.side_effect = lambda name, geometry: Mock(name=name)
    return backend


@pytest.fixture
def display(backend):
    config = DisplayConfig(
        base=BaseTrajectoryConfig(style="polyline"),
        contact=ContactTrajectoryConfig(style="polyline"),
    )
    return WholeBodyTrajectoryDisplay(config=config, backend=backend)


class TestProcessMessage:
    def test_defaults(self):
        display = WholeBodyTrajectoryDisplay()
        assert display.base_style is RenderStyle.POINT_SAMPLES
        assert display.contact_style is RenderStyle.POINT_SAMPLES
        assert display.trajectory is None

    def test_builds_base_and_contacts(self, display, gait_trajectory):
        display.process_message(gait_trajectory)

        assert isinstance(display.base_geometry(), Polyline)
        assert len(display.base_geometry()) == 8
        assert len(display.annotations) > 0
        assert all(isinstance(a, AxisAnnotation) for a in display.annotations)
        assert display.contact_slots.names == ["lf_foot", "rf_foot"]
        assert [len(g) for g in display.contact_geometries()] == [6, 8]

    def test_new_message_replaces_everything(self, display, backend, gait_trajectory, straight_trajectory):
        display.process_message(gait_trajectory)
        old_handles = _handles(display)

        display.process_message(straight_trajectory(n_steps=4))

        for handle in old_handles:
            handle.remove.assert_called_once()
        assert len(display.contact_slots) == 0
        assert display.contact_geometries() == []
        assert len(display.base_geometry()) == 4

    def test_empty_trajectory_warns_and_draws_nothing(self, display, gait_trajectory):
        display.process_message(gait_trajectory)

        with pytest.warns(EmptyTrajectoryWarning, match="no steps"):
            display.process_message(Trajectory([]))

        assert len(display.arena) == 0
        assert display.base_geometry() is None
        assert len(display.contact_slots) == 0

    def test_first_step_without_base_states(self, display):
        traj = Trajectory([TrajectoryStep(base=[]), TrajectoryStep.from_pose([1, 0, 0])])
        with pytest.warns(EmptyTrajectoryWarning, match="no base states"):
            display.process_message(traj)
        assert len(display.arena) == 0

    def test_contacts_without_base_pose_elsewhere(self, display, straight_trajectory):
        display.process_message(straight_trajectory(n_steps=3))
        assert display.base_geometry() is not None
        assert display.contact_geometries() == []

    def test_non_finite_state_does_not_stop_the_pass(self, display, straight_trajectory):
        traj = straight_trajectory(n_steps=4)
        traj[2].base = [BaseState(s.id, np.nan) for s in traj[2].base]
        with pytest.warns(UserWarning):
            display.process_message(traj)
        np.testing.assert_allclose(display.base_geometry().points[2], [0, 0, 0])

    def test_unknown_frame_falls_back_to_identity(self, gait_trajectory):
        display = WholeBodyTrajectoryDisplay(
            config=DisplayConfig(base=BaseTrajectoryConfig(style="polyline")),
            provider=StaticTransformProvider(fixed_frame="map"),
        )
        gait_trajectory.frame_id = "odom"

        with pytest.warns(FrameTransformWarning, match="'odom' to frame 'map'"):
            display.process_message(gait_trajectory)

        np.testing.assert_allclose(display.base_geometry().points[0], [0.0, 0.0, 0.5])

    def test_known_frame_is_applied(self, gait_trajectory):
        provider = StaticTransformProvider(
            fixed_frame="map", transforms={"odom": Transform(position=[0.0, 0.0, 1.0])}
        )
        display = WholeBodyTrajectoryDisplay(
            config=DisplayConfig(
                base=BaseTrajectoryConfig(style="polyline"),
                contact=ContactTrajectoryConfig(style="ribbon"),
            ),
            provider=provider,
        )
        gait_trajectory.frame_id = "odom"
        display.process_message(gait_trajectory)

        np.testing.assert_allclose(display.base_geometry().points[0], [0.0, 0.0, 1.5])
        np.testing.assert_allclose(display.contact_geometries()[0].points[0], [0.3, 0.2, 1.0])

    def test_printing_summary(self, gait_trajectory, capsys):
        display = WholeBodyTrajectoryDisplay(config=DisplayConfig(dev=DevConfig(printing=True)))
        display.process_message(gait_trajectory)
        display.process_message(gait_trajectory)
        out = capsys.readouterr().out
        assert out.count("Steps") == 1
        assert "points" in out


class TestStyleChanges:
    def test_round_trip_restores_identical_vertices(self, display, gait_trajectory):
        display.process_message(gait_trajectory)
        before = display.base_geometry().points.copy()

        assert display.set_base_style("ribbon")
        assert isinstance(display.base_geometry(), Ribbon)
        assert display.set_base_style(RenderStyle.POLYLINE)

        np.testing.assert_array_equal(display.base_geometry().points, before)

    def test_style_change_touches_only_its_kind(self, display, gait_trajectory):
        display.process_message(gait_trajectory)
        contact_entries = display.arena.entries(TrajectoryKind.CONTACT)

        display.set_base_style("points")

        assert isinstance(display.base_geometry(), PointSamples)
        assert display.arena.entries(TrajectoryKind.CONTACT) == contact_entries
        for entry in contact_entries:
            entry.handle.remove.assert_not_called()

    def test_contact_style_change(self, display, gait_trajectory):
        display.process_message(gait_trajectory)
        display.set_contact_style("points")
        assert display.contact_style is RenderStyle.POINT_SAMPLES
        assert display.config.contact.style is RenderStyle.POINT_SAMPLES
        assert all(isinstance(g, PointSamples) for g in display.contact_geometries())

    def test_same_style_is_a_no_op(self, display, gait_trajectory):
        display.process_message(gait_trajectory)
        entry = display.arena.get(TrajectoryKind.BASE, "path")
        assert not display.set_base_style("polyline")
        assert display.arena.get(TrajectoryKind.BASE, "path") is entry

    def test_style_change_before_any_message(self, display):
        assert display.set_base_style("ribbon")
        assert len(display.arena) == 0
        assert display.base_style is RenderStyle.RIBBON


class TestPropertyChanges:
    def test_base_properties_rebuild_base(self, display, gait_trajectory):
        display.process_message(gait_trajectory)
        display.update_base_properties(color=(1.0, 0.0, 0.0), alpha=0.5)
        np.testing.assert_allclose(display.base_geometry().colors[0], [1.0, 0.0, 0.0, 0.5])

    def test_axes_scale_changes_annotations(self, display, straight_trajectory):
        display.process_message(straight_trajectory(n_steps=10, spacing=0.02))
        assert [a.step_index for a in display.annotations] == [0, 3, 6, 9]

        display.update_base_properties(axes_scale=2.0)

        assert [a.step_index for a in display.annotations] == [0, 6, 9]
        assert display.annotations[0].axes_length == pytest.approx(0.08)

    def test_contact_properties_leave_base_alone(self, display, gait_trajectory):
        display.process_message(gait_trajectory)
        base_entry = display.arena.get(TrajectoryKind.BASE, "path")

        display.update_contact_properties(line_width=0.05, style="ribbon")

        assert display.arena.get(TrajectoryKind.BASE, "path") is base_entry
        assert all(g.line_width == 0.05 for g in display.contact_geometries())

    def test_contact_properties_reject_axes_scale(self, display):
        with pytest.raises(TypeError):
            display.update_contact_properties(axes_scale=2.0)


class TestFrameChangeAndReset:
    def test_fixed_frame_change_rebuilds_both_kinds(self, display, gait_trajectory):
        provider = StaticTransformProvider(fixed_frame="map", transforms={"world": Transform()})
        display.process_message(gait_trajectory)
        display.provider = provider
        provider.set_transform("world", Transform(position=[0.0, 0.0, 2.0]))

        display.fixed_frame_changed()

        np.testing.assert_allclose(display.base_geometry().points[0], [0.0, 0.0, 2.5])
        np.testing.assert_allclose(display.contact_geometries()[1].points[0], [0.3, -0.2, 2.0])

    def test_fixed_frame_change_without_trajectory(self, display):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            display.fixed_frame_changed()
        assert len(display.arena) == 0

    def test_reset(self, display, backend, gait_trajectory):
        display.process_message(gait_trajectory)
        handles = _handles(display)

        display.reset()

        assert display.trajectory is None
        assert len(display.arena) == 0
        for handle in handles:
            handle.remove.assert_called_once()
        # Nothing comes back on a later style change
        display.set_base_style("ribbon")
        assert len(display.arena) == 0


def _handles(display):
    return [entry.handle for entry in display.arena.entries()]


if __name__ == "__main__":
    pytest.main([__file__])
