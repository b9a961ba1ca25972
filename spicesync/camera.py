"""Device camera access using OpenCV."""

from __future__ import annotations

import logging

from .ai import EncodedImage

logger = logging.getLogger(__name__)


class CameraError(RuntimeError):
    """The camera could not be opened or did not deliver a frame."""


def _import_cv2():
    try:
        import cv2
    except ImportError:
        raise ImportError(
            "opencv-python is required: pip install opencv-python"
        ) from None
    return cv2


class Camera:
    """A live camera stream that can be turned into a single still frame.

    The stream is held from ``open()`` until ``release()``; release is safe
    to call any number of times.
    """

    def __init__(self, index: int = 0, jpeg_quality: int = 80) -> None:
        self._index = index
        self._jpeg_quality = jpeg_quality
        self._cap = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None

    def open(self) -> None:
        cv2 = _import_cv2()
        cap = cv2.VideoCapture(self._index)
        if not cap.isOpened():
            cap.release()
            raise CameraError(
                f"Could not open camera {self._index}. "
                "Check that it is connected and that access is allowed."
            )
        self._cap = cap
        logger.debug("Camera %d opened", self._index)

    def capture_still(self) -> EncodedImage:
        """Read one frame from the live stream and encode it as JPEG."""
        if self._cap is None:
            raise CameraError("Camera is not open")
        cv2 = _import_cv2()

        ret, frame = self._cap.read()
        if not ret or frame is None:
            raise CameraError(f"Could not read a frame from camera {self._index}")

        ok, buf = cv2.imencode(
            ".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self._jpeg_quality]
        )
        if not ok:
            raise CameraError("Could not encode the captured frame as JPEG")
        return EncodedImage.from_bytes(buf.tobytes(), "image/jpeg")

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.debug("Camera %d released", self._index)

    def __enter__(self) -> Camera:
        self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.release()

    @staticmethod
    def list_cameras(max_check: int = 10) -> list[int]:
        """List available camera indices by probing."""
        cv2 = _import_cv2()

        available: list[int] = []
        for i in range(max_check):
            cap = cv2.VideoCapture(i)
            if cap.isOpened():
                available.append(i)
            cap.release()
        return available
