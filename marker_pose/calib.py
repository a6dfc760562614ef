import cv2, numpy as np
from typing import Tuple

def load_calib(path: str) -> Tuple[np.ndarray, np.ndarray, tuple[int,int]]:
    """Read K, distortion and image size from an OpenCV FileStorage YAML."""
    fs = cv2.FileStorage(path, cv2.FILE_STORAGE_READ)
    if not fs.isOpened():
        raise FileNotFoundError(f"Calibration not found: {path}")
    try:
        K = fs.getNode("camera_matrix").mat()
        dist = fs.getNode("dist_coeffs").mat()
        w = int(fs.getNode("image_width").real()); h = int(fs.getNode("image_height").real())
    finally:
        fs.release()
    if K is None or K.shape != (3, 3):
        raise ValueError(f"{path}: camera_matrix must be 3x3")
    if dist is None:
        raise ValueError(f"{path}: dist_coeffs missing")
    return K.astype(np.float64), dist.astype(np.float64).reshape(-1), (w, h)
