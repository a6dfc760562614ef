"""Rotation matrix <-> Euler angle conversions (Rz·Ry·Rx composition)."""

import math

import numpy as np

from .pose_types import EulerAngles

SINGULAR_EPS = 1e-6
RAD2DEG = 180.0 / math.pi


def euler_to_matrix(angles: EulerAngles) -> np.ndarray:
    """
    Build the 3x3 rotation matrix Rz @ Ry @ Rx from Euler angles in radians.

    Applied to a column vector this rotates about X first, then Y, then Z.
    This is the single composition routine used for both point and
    orientation transforms.

    Args:
        angles: rotation about X, Y, Z in radians

    Returns:
        3x3 row-major rotation matrix (new array)
    """
    cx, sx = math.cos(angles.x), math.sin(angles.x)
    cy, sy = math.cos(angles.y), math.sin(angles.y)
    cz, sz = math.cos(angles.z), math.sin(angles.z)

    return np.array(
        [
            [cz * cy, cz * sy * sx - sz * cx, cz * sy * cx + sz * sx],
            [sz * cy, sz * sy * sx + cz * cx, sz * sy * cx - cz * sx],
            [-sy, cy * sx, cy * cx],
        ],
        dtype=np.float64,
    )


def matrix_to_euler(R: np.ndarray) -> EulerAngles:
    """
    Extract Euler angles in radians from a rotation matrix built as Rz @ Ry @ Rx.

    Near gimbal lock (pitch close to +-90 deg) yaw cannot be separated from
    roll, so z is fixed to 0 and the whole rotation goes into x.

    Args:
        R: 3x3 orthonormal rotation matrix

    Returns:
        EulerAngles in radians
    """
    R = np.asarray(R, dtype=np.float64)
    if R.shape != (3, 3):
        raise ValueError(f"expected a 3x3 matrix, got shape {R.shape}")

    sy = math.sqrt(R[0, 0] * R[0, 0] + R[1, 0] * R[1, 0])

    if sy >= SINGULAR_EPS:
        x = math.atan2(R[2, 1], R[2, 2])
        y = math.atan2(-R[2, 0], sy)
        z = math.atan2(R[1, 0], R[0, 0])
    else:
        x = math.atan2(-R[1, 2], R[1, 1])
        y = math.atan2(-R[2, 0], sy)
        z = 0.0

    return EulerAngles(x, y, z)


def to_degrees(angles: EulerAngles) -> EulerAngles:
    return EulerAngles(angles.x * RAD2DEG, angles.y * RAD2DEG, angles.z * RAD2DEG)
