from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Tuple

import cv2
import numpy as np

log = logging.getLogger(__name__)

SolveResult = Tuple[bool, np.ndarray, np.ndarray]

MAX_REPROJ_ERROR_PX = 1.0


class PnPSolver(ABC):
    """Recovers a marker->camera rotation vector and translation from 3D-2D pairs."""

    @abstractmethod
    def solve(
        self,
        object_points: np.ndarray,
        image_points: np.ndarray,
        camera_matrix: np.ndarray,
        dist_coeffs: np.ndarray,
    ) -> SolveResult: ...


class RotationConverter(ABC):
    @abstractmethod
    def to_matrix(self, rvec: np.ndarray) -> np.ndarray: ...


def reprojection_error(obj, img, rvec, tvec, K, dist) -> float:
    """Largest pixel distance between the detected corners and the reprojected object points."""
    proj, _ = cv2.projectPoints(obj, rvec, tvec, K, dist)
    return float(np.max(np.linalg.norm(proj.reshape(-1, 2) - img.reshape(-1, 2), axis=1)))


class OpenCVPnPSolver(PnPSolver):
    """
    solvePnP wrapper. Defaults to IPPE_SQUARE, which expects the four
    object points in the order TL, TR, BR, BL on the Z=0 plane.

    IPPE_SQUARE can return a flipped solution for an exactly head-on view.
    Each answer is reprojected; above `max_error_px` the solve is retried
    with `fallback_flags`, and if that is also off the solve fails.
    """

    def __init__(
        self,
        flags: int = cv2.SOLVEPNP_IPPE_SQUARE,
        fallback_flags: int = cv2.SOLVEPNP_ITERATIVE,
        max_error_px: float = MAX_REPROJ_ERROR_PX,
    ):
        self.flags = flags
        self.fallback_flags = fallback_flags
        self.max_error_px = max_error_px

    def _solve_once(self, obj, img, K, dist, flags):
        ok, rvec, tvec = cv2.solvePnP(obj, img, K, dist, flags=flags)
        if not ok or rvec is None or tvec is None:
            return None
        err = reprojection_error(obj, img, rvec, tvec, K, dist)
        if err > self.max_error_px:
            log.debug("solvePnP flags=%d reprojection error %.2fpx", flags, err)
            return None
        return rvec, tvec

    def solve(self, object_points, image_points, camera_matrix, dist_coeffs) -> SolveResult:
        obj = np.asarray(object_points, dtype=np.float32).reshape(-1, 1, 3)
        img = np.asarray(image_points, dtype=np.float32).reshape(-1, 1, 2)
        K = np.asarray(camera_matrix, dtype=np.float64).reshape(3, 3)
        dist = np.asarray(dist_coeffs, dtype=np.float64).reshape(-1, 1)

        sol = self._solve_once(obj, img, K, dist, self.flags)
        if sol is None and self.fallback_flags is not None:
            sol = self._solve_once(obj, img, K, dist, self.fallback_flags)
        if sol is None:
            return False, np.zeros(3), np.zeros(3)
        rvec, tvec = sol
        return True, rvec.reshape(3), tvec.reshape(3)


class OpenCVRotationConverter(RotationConverter):
    def to_matrix(self, rvec) -> np.ndarray:
        R, _ = cv2.Rodrigues(np.asarray(rvec, dtype=np.float64).reshape(3))
        return R
