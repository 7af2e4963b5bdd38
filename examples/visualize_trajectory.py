"""Interactive whole-body trajectory visualization using Viser.

Shows a trotting quadruped's base path with orientation frames and one
trajectory per foot. The GUI controls change the render style and appearance
of each kind live. A background thread plays the role of a planner and
publishes a new trajectory every few seconds.

Run this script and open the displayed URL in your browser. Pass a JSON file
(see wbtviz.trajectory.Trajectory.from_dict) to show that instead.
"""

import os
import sys
import threading
import time

# Add this directory to path to import the example trajectory
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from trot_gait import make_trot_trajectory

from wbtviz import DevConfig, DisplayConfig, WholeBodyTrajectoryDisplay, load_trajectory
from wbtviz.config import BaseTrajectoryConfig, ContactTrajectoryConfig
from wbtviz.plotting import viser


def main(path: str | None = None) -> None:
    trajectory = load_trajectory(path) if path else make_trot_trajectory()

    server = viser.create_server(trajectory)
    config = DisplayConfig(
        base=BaseTrajectoryConfig(style="polyline", axes_scale=1.5),
        contact=ContactTrajectoryConfig(style="points", color=(1.0, 0.5, 0.0)),
        dev=DevConfig(printing=True),
    )
    display = WholeBodyTrajectoryDisplay(config=config, backend=viser.ViserSceneBackend(server))
    viser.add_display_controls(server, display)
    display.process_message(trajectory)
    _, update_plots = viser.add_trajectory_plots(server, trajectory)

    if path is None:

        def planner_loop() -> None:
            """Replan with an alternating turn direction."""
            k = 0
            while True:
                time.sleep(3.0)
                k += 1
                new_trajectory = make_trot_trajectory(yaw_rate=0.3 * (-1) ** k)
                display.process_message(new_trajectory)
                update_plots(new_trajectory)

        threading.Thread(target=planner_loop, daemon=True).start()

    server.sleep_forever()


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else None)
