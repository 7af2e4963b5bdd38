import pytest

from wbtviz.trajectory import Trajectory, TrajectoryStep


@pytest.fixture
def straight_trajectory():
    """Factory for a base walking along +x with no contacts."""

    def make(n_steps=10, spacing=0.1, frame_id="world"):
        steps = [
            TrajectoryStep.from_pose(position=[spacing * i, 0.0, 0.5], time=0.1 * i)
            for i in range(n_steps)
        ]
        return Trajectory(steps, frame_id=frame_id)

    return make


@pytest.fixture
def gait_trajectory():
    """Eight steps; "lf_foot" lifts off in steps 3-4, "rf_foot" stays down throughout."""
    steps = []
    for i in range(8):
        contacts = {}
        if i not in (3, 4):
            contacts["lf_foot"] = [0.3, 0.2, -0.5]
        contacts["rf_foot"] = [0.3, -0.2, -0.5]
        steps.append(
            TrajectoryStep.from_pose(position=[0.05 * i, 0.0, 0.5], contacts=contacts, time=0.1 * i)
        )
    return Trajectory(steps, frame_id="world")
