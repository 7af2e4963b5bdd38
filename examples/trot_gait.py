"""Synthetic whole-body trajectory of a quadruped trotting forward.

Diagonal leg pairs alternate between stance and swing. A foot in swing is
dropped from the step's contact list, which is how a planner reports a
lift-off, so the end-effector trajectories show gaps.
"""

import numpy as np

from wbtviz.trajectory import Trajectory, TrajectoryStep

FEET = {
    "lf_foot": np.array([0.35, 0.2, -0.45]),
    "rf_foot": np.array([0.35, -0.2, -0.45]),
    "lh_foot": np.array([-0.35, 0.2, -0.45]),
    "rh_foot": np.array([-0.35, -0.2, -0.45]),
}
DIAGONALS = (("lf_foot", "rh_foot"), ("rf_foot", "lh_foot"))


def make_trot_trajectory(
    n_steps: int = 120,
    dt: float = 0.02,
    speed: float = 0.4,
    yaw_rate: float = 0.3,
    phase_steps: int = 15,
    frame_id: str = "world",
) -> Trajectory:
    """Build a trot of ``n_steps`` steps.

    Args:
        n_steps: Number of trajectory steps
        dt: Time between steps in seconds
        speed: Forward speed of the base in m/s
        yaw_rate: Turning rate of the base in rad/s
        phase_steps: Steps per half gait cycle
        frame_id: Frame the trajectory is expressed in

    Returns:
        Trajectory with base pose and stance feet at every step
    """
    steps = []
    position = np.array([0.0, 0.0, 0.45])
    yaw = 0.0
    for i in range(n_steps):
        position = position + dt * speed * np.array([np.cos(yaw), np.sin(yaw), 0.0])
        yaw += dt * yaw_rate
        bob = 0.01 * np.sin(2.0 * np.pi * i / phase_steps)
        roll = 0.03 * np.sin(2.0 * np.pi * i / (2 * phase_steps))

        stance = DIAGONALS[(i // phase_steps) % 2]
        steps.append(
            TrajectoryStep.from_pose(
                position=position + [0.0, 0.0, bob],
                rpy=[roll, 0.0, yaw],
                contacts={name: FEET[name] for name in stance},
                time=i * dt,
            )
        )
    return Trajectory(steps, frame_id=frame_id)


if __name__ == "__main__":
    from wbtviz.trajectory import save_trajectory

    save_trajectory(make_trot_trajectory(), "trot.json")
    print("Wrote trot.json")
