from __future__ import annotations

import time
from typing import Optional, Sequence

from .pose_types import (
    ZERO_POINT,
    ZERO_ROTATION,
    EulerAngles,
    Point3D,
    PoseEstimation,
    PoseResult,
)


def fuse_poses(
    estimations: Sequence[PoseEstimation], timestamp: Optional[float] = None
) -> PoseResult:
    """
    Fuse single-marker estimates from one frame by per-axis averaging.

    Rotations are averaged component-wise in degrees. This is not valid
    across the +-180 deg wrap; markers are expected to share a coarse
    orientation band.
    """
    ts = time.time() if timestamp is None else float(timestamp)
    poses = tuple(estimations)

    if not poses:
        return PoseResult(
            poses=(),
            camera_position=ZERO_POINT,
            camera_rotation=ZERO_ROTATION,
            detected_marker_ids=(),
            timestamp=ts,
        )

    n = len(poses)
    position = Point3D(
        sum(p.position.x for p in poses) / n,
        sum(p.position.y for p in poses) / n,
        sum(p.position.z for p in poses) / n,
    )
    rotation = EulerAngles(
        sum(p.rotation.x for p in poses) / n,
        sum(p.rotation.y for p in poses) / n,
        sum(p.rotation.z for p in poses) / n,
    )

    return PoseResult(
        poses=poses,
        camera_position=position,
        camera_rotation=rotation,
        detected_marker_ids=tuple(p.marker_id for p in poses),
        timestamp=ts,
    )
