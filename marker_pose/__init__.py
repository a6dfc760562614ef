"""Camera pose estimation from fiducial markers with known world placement."""

from .config import TrackerConfig, default_marker_definitions, load_config
from .fusion import fuse_poses
from .localize import MarkerPoseResolver, resolve
from .pose_types import (
    EulerAngles,
    MarkerDefinition,
    MarkerDetection,
    Point3D,
    PoseEstimation,
    PoseResult,
    build_marker_table,
)
from .tracker import MarkerPoseTracker

__all__ = [
    "EulerAngles",
    "MarkerDefinition",
    "MarkerDetection",
    "MarkerPoseResolver",
    "MarkerPoseTracker",
    "Point3D",
    "PoseEstimation",
    "PoseResult",
    "TrackerConfig",
    "build_marker_table",
    "default_marker_definitions",
    "fuse_poses",
    "load_config",
    "resolve",
]
