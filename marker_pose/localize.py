from __future__ import annotations

import logging
from typing import Optional

import cv2
import numpy as np

from .pose_types import MarkerDetection, MarkerTable, PoseEstimation
from .rotation import matrix_to_euler, to_degrees
from .solvers import (
    OpenCVPnPSolver,
    OpenCVRotationConverter,
    PnPSolver,
    RotationConverter,
)
from .transforms import (
    camera_center_in_marker,
    camera_rotation_in_world,
    point_marker_to_world,
)

log = logging.getLogger(__name__)


def marker_object_points(marker_size_m: float) -> np.ndarray:
    """Marker corners in the marker-local frame, Z=0, ordered TL, TR, BR, BL."""
    h = marker_size_m / 2.0
    return np.array(
        [
            [-h, h, 0.0],
            [h, h, 0.0],
            [h, -h, 0.0],
            [-h, -h, 0.0],
        ],
        dtype=np.float32,
    )


def resolve(
    detection: MarkerDetection,
    markers: MarkerTable,
    camera_matrix,
    dist_coeffs,
    marker_size_m: float,
    solver: Optional[PnPSolver] = None,
    converter: Optional[RotationConverter] = None,
) -> Optional[PoseEstimation]:
    """
    Estimate the camera pose in world coordinates from one detected marker.

    Returns None when the marker id is not in `markers` or the PnP solve
    fails. Corner order is trusted as delivered by the detector.
    """
    definition = markers.get(detection.id)
    if definition is None:
        log.debug("marker %d: no definition, skipped", detection.id)
        return None

    solver = solver or OpenCVPnPSolver()
    converter = converter or OpenCVRotationConverter()

    object_points = marker_object_points(marker_size_m)
    image_points = detection.image_points()

    try:
        ok, rvec, tvec = solver.solve(object_points, image_points, camera_matrix, dist_coeffs)
    except (cv2.error, ValueError) as e:
        log.warning("marker %d: PnP solve raised: %s", detection.id, e)
        return None
    if not ok:
        log.debug("marker %d: PnP solve failed", detection.id)
        return None

    rvec = np.asarray(rvec, dtype=np.float64).reshape(3)
    tvec = np.asarray(tvec, dtype=np.float64).reshape(3)
    R = converter.to_matrix(rvec)

    cam_in_marker = camera_center_in_marker(R, tvec)
    position = point_marker_to_world(
        cam_in_marker, definition.center, definition.rotation_to_world
    )

    world_R = camera_rotation_in_world(R, definition.rotation_to_world)
    rotation = to_degrees(matrix_to_euler(world_R))

    return PoseEstimation(
        position=position,
        rotation=rotation,
        rvec=(float(rvec[0]), float(rvec[1]), float(rvec[2])),
        tvec=(float(tvec[0]), float(tvec[1]), float(tvec[2])),
        marker_id=detection.id,
    )


class MarkerPoseResolver:
    """Binds the marker table, intrinsics and solver capabilities for per-frame use."""

    def __init__(
        self,
        markers: MarkerTable,
        camera_matrix,
        dist_coeffs,
        marker_size_m: float,
        solver: Optional[PnPSolver] = None,
        converter: Optional[RotationConverter] = None,
    ):
        self.markers = markers
        self.K = np.asarray(camera_matrix, dtype=np.float64).reshape(3, 3)
        self.dist = np.asarray(dist_coeffs, dtype=np.float64).reshape(-1)
        self.marker_size_m = float(marker_size_m)
        self.solver = solver or OpenCVPnPSolver()
        self.converter = converter or OpenCVRotationConverter()

    def resolve(self, detection: MarkerDetection) -> Optional[PoseEstimation]:
        return resolve(
            detection,
            self.markers,
            self.K,
            self.dist,
            self.marker_size_m,
            solver=self.solver,
            converter=self.converter,
        )

    def resolve_all(
        self, detections: list[MarkerDetection], logger: Optional[logging.Logger] = None
    ) -> list[PoseEstimation]:
        """Resolve every detection; a marker that raises is logged and skipped."""
        logger = logger or log
        poses = []
        for det in detections:
            try:
                pose = self.resolve(det)
            except Exception as e:
                logger.error("marker %d: pose estimation error: %s", det.id, e)
                continue
            if pose is not None:
                poses.append(pose)
        return poses
