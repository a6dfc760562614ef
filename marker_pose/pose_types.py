from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping

import numpy as np


@dataclass(frozen=True)
class Point3D:
    x: float
    y: float
    z: float

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, values: Any) -> "Point3D":
        v = np.asarray(values, dtype=np.float64).reshape(3)
        return cls(float(v[0]), float(v[1]), float(v[2]))


@dataclass(frozen=True)
class EulerAngles:
    """Rotation about X, Y, Z composed as Rz·Ry·Rx. Units depend on the owner."""

    x: float
    y: float
    z: float

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, values: Any) -> "EulerAngles":
        v = np.asarray(values, dtype=np.float64).reshape(3)
        return cls(float(v[0]), float(v[1]), float(v[2]))


ZERO_POINT = Point3D(0.0, 0.0, 0.0)
ZERO_ROTATION = EulerAngles(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class MarkerDefinition:
    id: int
    face: str
    normal: Point3D
    center: Point3D  # world frame, meters
    rotation_to_world: EulerAngles  # radians


@dataclass(frozen=True)
class MarkerDetection:
    """Detector output for one marker: corners ordered TL, TR, BR, BL in pixels."""

    id: int
    corners: tuple[tuple[float, float], ...]

    def __post_init__(self):
        pts = np.asarray(self.corners, dtype=np.float64).reshape(-1, 2)
        if pts.shape != (4, 2):
            raise ValueError(f"marker {self.id}: expected 4 corners, got {pts.shape[0]}")
        object.__setattr__(self, "corners", tuple((float(u), float(v)) for u, v in pts))

    def image_points(self) -> np.ndarray:
        return np.array(self.corners, dtype=np.float32)


@dataclass(frozen=True)
class PoseEstimation:
    position: Point3D  # camera optical center, world frame
    rotation: EulerAngles  # degrees, render-camera convention
    rvec: tuple[float, float, float]
    tvec: tuple[float, float, float]
    marker_id: int


@dataclass(frozen=True)
class PoseResult:
    poses: tuple[PoseEstimation, ...]
    camera_position: Point3D
    camera_rotation: EulerAngles
    detected_marker_ids: tuple[int, ...]
    timestamp: float  # unix seconds


MarkerTable = Mapping[int, MarkerDefinition]


def build_marker_table(definitions: Iterable[MarkerDefinition]) -> MarkerTable:
    """Index definitions by id into a read-only mapping; ids must be unique."""
    table: dict[int, MarkerDefinition] = {}
    for d in definitions:
        if d.id < 0:
            raise ValueError(f"marker id must be non-negative, got {d.id}")
        if d.id in table:
            raise ValueError(f"duplicate marker id: {d.id}")
        table[d.id] = d
    return MappingProxyType(table)
