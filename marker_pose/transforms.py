"""Frame conversions between marker-local, optical-camera and world/render frames."""

import numpy as np

from .pose_types import EulerAngles, Point3D
from .rotation import euler_to_matrix

# Optical camera (X right, Y down, Z forward) -> render camera (X right, Y up, Z back)
OPTICAL_TO_RENDER = np.diag([1.0, -1.0, -1.0])


def _as_rotation(R) -> np.ndarray:
    R = np.asarray(R, dtype=np.float64)
    if R.shape != (3, 3):
        raise ValueError(f"expected a 3x3 rotation matrix, got shape {R.shape}")
    return R


def point_marker_to_world(
    point: Point3D, marker_center: Point3D, marker_rotation: EulerAngles
) -> Point3D:
    """
    Transform a point from marker-local coordinates to world coordinates.

    Args:
        point: point in the marker-local frame
        marker_center: marker origin in world coordinates
        marker_rotation: marker-local -> world rotation, Euler radians

    Returns:
        Point in world coordinates
    """
    R = euler_to_matrix(marker_rotation)
    p_world = R @ point.as_array() + marker_center.as_array()
    return Point3D.from_array(p_world)


def optical_to_render(R_marker_to_camera) -> np.ndarray:
    """
    Invert a marker->optical-camera rotation and flip it into render convention.

    Returns R^T @ diag(1, -1, -1): the render camera's axes expressed in the
    marker-local frame.
    """
    R = _as_rotation(R_marker_to_camera)
    return R.T @ OPTICAL_TO_RENDER


def camera_rotation_in_world(R_marker_to_camera, marker_rotation: EulerAngles) -> np.ndarray:
    """
    Orientation of the render camera in world axes.

    Computes R_m2w @ (R^T @ diag(1, -1, -1)). The marker->world rotation
    must stay on the left.

    Args:
        R_marker_to_camera: 3x3 rotation from solvePnP/Rodrigues
        marker_rotation: marker-local -> world rotation, Euler radians

    Returns:
        3x3 camera rotation matrix in world frame
    """
    RtC = optical_to_render(R_marker_to_camera)
    R_m2w = euler_to_matrix(marker_rotation)
    return R_m2w @ RtC


def camera_center_in_marker(R_marker_to_camera, tvec) -> Point3D:
    """
    Camera optical center in marker-local coordinates.

    For X_cam = R @ X_marker + t the camera origin maps back to -R^T @ t.
    """
    R = _as_rotation(R_marker_to_camera)
    t = np.asarray(tvec, dtype=np.float64).reshape(3)
    return Point3D.from_array(-R.T @ t)
