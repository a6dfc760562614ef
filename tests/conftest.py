import math

import numpy as np
import pytest

from marker_pose.pose_types import (
    EulerAngles,
    MarkerDefinition,
    Point3D,
    build_marker_table,
)
from marker_pose.solvers import PnPSolver, RotationConverter


# Marker facing the camera head-on: marker +Y maps to camera -Y, +Z to -Z
FACING_R = np.diag([1.0, -1.0, -1.0])


class StubSolver(PnPSolver):
    """Returns a fixed rvec/tvec and records what it was called with."""

    def __init__(self, ok=True, rvec=(math.pi, 0.0, 0.0), tvec=(0.0, 0.0, 0.5), exc=None):
        self.ok = ok
        self.rvec = np.array(rvec, dtype=np.float64)
        self.tvec = np.array(tvec, dtype=np.float64)
        self.exc = exc
        self.calls = []

    def solve(self, object_points, image_points, camera_matrix, dist_coeffs):
        self.calls.append((object_points, image_points, camera_matrix, dist_coeffs))
        if self.exc is not None:
            raise self.exc
        return self.ok, self.rvec, self.tvec


class StubConverter(RotationConverter):
    def __init__(self, R=FACING_R):
        self.R = np.array(R, dtype=np.float64)

    def to_matrix(self, rvec):
        return self.R.copy()


@pytest.fixture
def front_marker():
    return MarkerDefinition(
        0, "front", Point3D(0, 0, 1), Point3D(0, 0, 0.06), EulerAngles(0, 0, 0)
    )


@pytest.fixture
def top_marker():
    return MarkerDefinition(
        1, "top", Point3D(0, 1, 0), Point3D(0, 0.06, 0), EulerAngles(-math.pi / 2, 0, 0)
    )


@pytest.fixture
def marker_table(front_marker, top_marker):
    return build_marker_table([front_marker, top_marker])


@pytest.fixture
def camera_matrix():
    return np.array(
        [[600.0, 0.0, 320.0], [0.0, 600.0, 240.0], [0.0, 0.0, 1.0]], dtype=np.float64
    )


@pytest.fixture
def dist_coeffs():
    return np.zeros(5, dtype=np.float64)




@pytest.fixture
def make_solver():
    return StubSolver


@pytest.fixture
def make_converter():
    return StubConverter
