"""Rigid-body helpers used by the trajectory builders.

Quaternions are stored as numpy arrays in ``[w, x, y, z]`` order, which is the
convention viser uses for ``wxyz`` handles.
"""

from dataclasses import dataclass, field

import numpy as np

IDENTITY_WXYZ = np.array([1.0, 0.0, 0.0, 0.0])


def all_finite(*arrays) -> bool:
    """Return True if every component of every array is finite."""
    return all(bool(np.all(np.isfinite(np.asarray(a, dtype=float)))) for a in arrays)


def quaternion_from_rpy(rpy: np.ndarray) -> np.ndarray:
    """Convert roll-pitch-yaw angles to a quaternion (wxyz format).

    The rotation is composed as ``Rz(yaw) @ Ry(pitch) @ Rx(roll)``.

    Args:
        rpy: Array of shape (3,) with roll, pitch and yaw in radians

    Returns:
        Quaternion array [w, x, y, z]
    """
    roll, pitch, yaw = (0.5 * float(a) for a in rpy)
    cr, sr = np.cos(roll), np.sin(roll)
    cp, sp = np.cos(pitch), np.sin(pitch)
    cy, sy = np.cos(yaw), np.sin(yaw)
    return np.array(
        [
            cr * cp * cy + sr * sp * sy,
            sr * cp * cy - cr * sp * sy,
            cr * sp * cy + sr * cp * sy,
            cr * cp * sy - sr * sp * cy,
        ]
    )


def quaternion_multiply(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Multiply two quaternions (wxyz format).

    Args:
        q1: First quaternion [w, x, y, z]
        q2: Second quaternion [w, x, y, z]

    Returns:
        Product quaternion [w, x, y, z]
    """
    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2
    return np.array(
        [
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        ]
    )


def rotate_vector_by_quaternion(v: np.ndarray, q: np.ndarray) -> np.ndarray:
    """Rotate vector v by quaternion q (wxyz format).

    Args:
        v: Vector of shape (3,)
        q: Quaternion of shape (4,) in [w, x, y, z] format

    Returns:
        Rotated vector of shape (3,)
    """
    v = np.asarray(v, dtype=float)
    w, x, y, z = q
    u = np.array([x, y, z])
    t = 2.0 * np.cross(u, v)
    return v + w * t + np.cross(u, t)


def quaternion_from_two_vectors(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Smallest rotation (wxyz) that takes direction ``a`` onto direction ``b``."""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    a = a / np.linalg.norm(a)
    b = b / np.linalg.norm(b)
    d = float(np.dot(a, b))
    if d < -1.0 + 1e-9:
        # Antiparallel: rotate half a turn about any axis orthogonal to a
        axis = np.cross(a, [1.0, 0.0, 0.0])
        if np.linalg.norm(axis) < 1e-6:
            axis = np.cross(a, [0.0, 1.0, 0.0])
        axis = axis / np.linalg.norm(axis)
        return np.array([0.0, *axis])
    c = np.cross(a, b)
    q = np.array([1.0 + d, *c])
    return q / np.linalg.norm(q)


@dataclass(frozen=True, eq=False)
class Transform:
    """Rigid transform from a message frame into the fixed (world) frame.

    Attributes:
        position: Translation of shape (3,)
        wxyz: Orientation quaternion of shape (4,)
    """

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    wxyz: np.ndarray = field(default_factory=lambda: IDENTITY_WXYZ.copy())

    def __post_init__(self):
        object.__setattr__(self, "position", np.asarray(self.position, dtype=float).reshape(3))
        object.__setattr__(self, "wxyz", np.asarray(self.wxyz, dtype=float).reshape(4))

    @classmethod
    def identity(cls) -> "Transform":
        return cls()

    def apply(self, point: np.ndarray) -> np.ndarray:
        """Map a point expressed in the message frame into the world frame."""
        return self.position + rotate_vector_by_quaternion(point, self.wxyz)

    def apply_many(self, points: np.ndarray) -> np.ndarray:
        points = np.asarray(points, dtype=float).reshape(-1, 3)
        return np.array([self.apply(p) for p in points]).reshape(-1, 3)
