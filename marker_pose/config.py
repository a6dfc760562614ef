from __future__ import annotations

import json
import math
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any, Optional

import numpy as np

from .calib import load_calib
from .logging_utils import parse_level
from .pose_types import (
    EulerAngles,
    MarkerDefinition,
    MarkerTable,
    Point3D,
    build_marker_table,
)

CUBE_SIZE_M = 0.12
MARKER_SIZE_M = 0.09


def default_marker_definitions(cube_size_m: float = CUBE_SIZE_M) -> list[MarkerDefinition]:
    """
    Markers on five faces of a cube centered at the world origin.
    World axes: X right, Y up, Z toward the viewer (front face).
    """
    h = cube_size_m / 2
    # right/left use y=+pi/2 and y=-pi/2 so local +Z lands on the face normal
    return [
        MarkerDefinition(0, "front", Point3D(0, 0, 1), Point3D(0, 0, h), EulerAngles(0, 0, 0)),
        MarkerDefinition(1, "top", Point3D(0, 1, 0), Point3D(0, h, 0), EulerAngles(-math.pi / 2, 0, 0)),
        MarkerDefinition(2, "right", Point3D(1, 0, 0), Point3D(h, 0, 0), EulerAngles(0, math.pi / 2, 0)),
        MarkerDefinition(3, "back", Point3D(0, 0, -1), Point3D(0, 0, -h), EulerAngles(0, math.pi, 0)),
        MarkerDefinition(4, "left", Point3D(-1, 0, 0), Point3D(-h, 0, 0), EulerAngles(0, -math.pi / 2, 0)),
    ]


@dataclass
class TrackerConfig:
    camera_name: str = "cam"
    marker_size_m: float = MARKER_SIZE_M
    cube_size_m: float = CUBE_SIZE_M
    # Approximate intrinsics for 640x480
    fx: float = 600.0
    fy: float = 600.0
    cx: float = 320.0
    cy: float = 240.0
    dist_coeffs: list[float] = field(default_factory=lambda: [0.0] * 5)
    calibration_path: Optional[str] = None
    markers: Optional[list[MarkerDefinition]] = None  # None -> cube faces
    log_level: str = "INFO"
    log_path: Optional[str] = None

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)

    def apply_overrides(self, **kwargs: Any) -> "TrackerConfig":
        for key, value in kwargs.items():
            if value is not None and hasattr(self, key):
                setattr(self, key, value)
        return self

    def camera_matrix(self) -> np.ndarray:
        return np.array(
            [[self.fx, 0.0, self.cx], [0.0, self.fy, self.cy], [0.0, 0.0, 1.0]],
            dtype=np.float64,
        )

    def intrinsics(self) -> tuple[np.ndarray, np.ndarray]:
        """(K, dist) from the calibration file when set, otherwise from fx/fy/cx/cy."""
        if self.calibration_path:
            K, dist, _ = load_calib(self.calibration_path)
            return K, dist
        return self.camera_matrix(), np.asarray(self.dist_coeffs, dtype=np.float64)

    def marker_table(self) -> MarkerTable:
        defs = self.markers if self.markers is not None else default_marker_definitions(self.cube_size_m)
        return build_marker_table(defs)


def _vec3(value: Any, name: str) -> tuple[float, float, float]:
    if isinstance(value, dict):
        value = [value.get("x", 0.0), value.get("y", 0.0), value.get("z", 0.0)]
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"{name} must be a 3-element list or an x/y/z mapping")
    return float(value[0]), float(value[1]), float(value[2])


def _parse_marker(raw: Any) -> MarkerDefinition:
    if not isinstance(raw, dict):
        raise ValueError("each marker must be a mapping")
    if "id" not in raw or "center" not in raw:
        raise ValueError("marker entries need at least 'id' and 'center'")
    return MarkerDefinition(
        id=int(raw["id"]),
        face=str(raw.get("face", "")),
        normal=Point3D(*_vec3(raw.get("normal", [0.0, 0.0, 1.0]), "normal")),
        center=Point3D(*_vec3(raw["center"], "center")),
        rotation_to_world=EulerAngles(
            *_vec3(raw.get("rotation_to_world", [0.0, 0.0, 0.0]), "rotation_to_world")
        ),
    )


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        import yaml  # type: ignore
    except Exception as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "YAML config requested but PyYAML is not installed. "
            "Install with: pip install pyyaml"
        ) from exc
    with path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ValueError("YAML config root must be a mapping")
    return data


def load_config(path: str | Path) -> TrackerConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")

    if p.suffix.lower() in {".yaml", ".yml"}:
        raw = _load_yaml(p)
    else:
        with p.open("r", encoding="utf-8") as fp:
            raw = json.load(fp)

    if not isinstance(raw, dict):
        raise ValueError("Config root must be a JSON/YAML object")

    cfg = TrackerConfig()
    cfg.camera_name = str(raw.get("camera_name", cfg.camera_name))
    cfg.marker_size_m = float(raw.get("marker_size_m", cfg.marker_size_m))
    cfg.cube_size_m = float(raw.get("cube_size_m", cfg.cube_size_m))
    if cfg.marker_size_m <= 0:
        raise ValueError("marker_size_m must be positive")
    cfg.fx = float(raw.get("fx", cfg.fx))
    cfg.fy = float(raw.get("fy", cfg.fy))
    cfg.cx = float(raw.get("cx", cfg.cx))
    cfg.cy = float(raw.get("cy", cfg.cy))

    dist_raw = raw.get("dist_coeffs", cfg.dist_coeffs)
    if not isinstance(dist_raw, (list, tuple)) or len(dist_raw) != 5:
        raise ValueError("dist_coeffs must be a list of 5 numbers")
    cfg.dist_coeffs = [float(v) for v in dist_raw]

    calib = raw.get("calibration_path", cfg.calibration_path)
    cfg.calibration_path = str(calib) if calib is not None else None

    markers_raw = raw.get("markers")
    if markers_raw is not None:
        if not isinstance(markers_raw, list):
            raise ValueError("markers must be a list of marker definitions")
        cfg.markers = [_parse_marker(m) for m in markers_raw]
        # reject duplicate ids at load time
        build_marker_table(cfg.markers)

    cfg.log_level = str(raw.get("log_level", cfg.log_level)).upper()
    parse_level(cfg.log_level)
    log_path = raw.get("log_path", cfg.log_path)
    cfg.log_path = str(log_path) if log_path is not None else None
    return cfg
