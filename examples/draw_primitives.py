"""Immediate-mode debug drawing with PrimitiveBuffer.

Every cycle queues a handful of primitives (a ground-reaction force arrow, a
friction cone, the centre of mass, a label) and flushes them as one batch to
a viser scene. A NaN sample is queued every few cycles; it is dropped at
admission and the rest of the batch still renders.
"""

import time

import numpy as np

from wbtviz import Color, PrimitiveBuffer, RealtimePublisher
from wbtviz.plotting import viser

RATE_HZ = 30.0


def main() -> None:
    server = viser.create_server()
    renderer = viser.ViserMarkerRenderer(server)
    buffer = PrimitiveBuffer(publisher=RealtimePublisher(renderer.render))

    t0 = time.time()
    cycle = 0
    while True:
        t = time.time() - t0
        com = np.array([0.1 * np.sin(t), 0.05 * np.cos(t), 0.45])
        foot = np.array([0.35, 0.2, 0.0])
        force = np.array([20.0 * np.sin(2 * t), 10.0 * np.cos(2 * t), 120.0])

        buffer.draw_sphere(com, 0.03, Color(1.0, 0.8, 0.0))
        buffer.draw_line(com, foot, 0.005, Color(0.6, 0.6, 0.6))
        buffer.draw_arrow(foot, foot + force / 400.0, Color(1.0, 0.2, 0.2))
        buffer.draw_cone(foot, [0.0, 0.0, 1.0], 0.15, 0.1, Color(0.2, 1.0, 0.2, 0.5))
        buffer.draw_point(foot, 0.02, Color(1.0, 1.0, 1.0))
        buffer.draw_text(
            f"|f| = {np.linalg.norm(force):.1f} N",
            com + [0.0, 0.0, 0.15],
            0.05,
            Color(1.0, 1.0, 1.0),
        )
        if cycle % 10 == 0:
            buffer.draw_sphere([np.nan, 0.0, 0.0], 0.05, Color(1.0, 0.0, 0.0))

        buffer.flush(stamp=t)
        cycle += 1
        time.sleep(1.0 / RATE_HZ)


if __name__ == "__main__":
    main()
