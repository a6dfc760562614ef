from __future__ import annotations

import logging
import time
from collections import deque
from typing import Callable, Iterable, Optional

from .config import TrackerConfig
from .fusion import fuse_poses
from .localize import MarkerPoseResolver
from .logging_utils import tracker_logger
from .pose_types import MarkerDetection, PoseResult


class MarkerPoseTracker:
    """
    Per-frame glue: resolve each detection, fuse, remember the last good result.

    Frames where no marker resolves still return the zero-pose result from
    fusion but leave `last_result` untouched.
    """

    def __init__(
        self,
        resolver: MarkerPoseResolver,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.resolver = resolver
        self.logger = logger or logging.getLogger(__name__)
        self._clock = clock
        self._frame_times: deque[float] = deque()
        self.last_result: Optional[PoseResult] = None
        self.frames = 0

    @classmethod
    def from_config(cls, config: TrackerConfig, logger: Optional[logging.Logger] = None) -> "MarkerPoseTracker":
        logger = logger or tracker_logger(
            config.camera_name, config.log_level, log_path=config.log_path
        )
        K, dist = config.intrinsics()
        resolver = MarkerPoseResolver(config.marker_table(), K, dist, config.marker_size_m)
        logger.info("tracker ready: %d markers, size=%.3fm", len(resolver.markers), config.marker_size_m)
        return cls(resolver, logger=logger)

    @property
    def fps(self) -> int:
        return len(self._frame_times)

    def _tick(self) -> None:
        now = self._clock()
        self._frame_times.append(now)
        while self._frame_times and self._frame_times[0] < now - 1.0:
            self._frame_times.popleft()

    def process(
        self, detections: Iterable[MarkerDetection], timestamp: Optional[float] = None
    ) -> PoseResult:
        self._tick()
        dets = list(detections)

        poses = self.resolver.resolve_all(dets, logger=self.logger)
        result = fuse_poses(poses, timestamp=timestamp)
        if poses:
            self.last_result = result

        self.frames += 1
        self.logger.debug(
            "frame=%d dets=%d resolved=%d fps=%d",
            self.frames,
            len(dets),
            len(poses),
            self.fps,
        )
        return result

    def clear(self) -> None:
        self.last_result = None
