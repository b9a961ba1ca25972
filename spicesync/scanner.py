"""Scan workflow: capture a photo, recognize ingredients, review, commit."""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Callable

from .ai import GatewayError
from .camera import Camera, CameraError

if TYPE_CHECKING:
    from .ai import AIGateway, EncodedImage
    from .models import Ingredient
    from .pantry import PantryStore

logger = logging.getLogger(__name__)


class ScanState(enum.Enum):
    IDLE = "idle"  # camera off
    CAPTURING = "capturing"  # camera live
    PROCESSING = "processing"  # waiting on the AI gateway
    REVIEW = "review"
    COMMITTED = "committed"


class ScanWorkflow:
    """Drives one scan from camera to pantry.

    The camera is owned only while CAPTURING and is released on every way
    out of that state. Leaving the ``with`` block abandons an unfinished
    scan.
    """

    def __init__(
        self,
        gateway: AIGateway,
        pantry: PantryStore,
        camera_factory: Callable[[], Camera] = Camera,
    ) -> None:
        self._gateway = gateway
        self._pantry = pantry
        self._camera_factory = camera_factory
        self._camera: Camera | None = None
        self._state = ScanState.IDLE
        self._items: list[Ingredient] = []
        self._last_error: Exception | None = None
        self._session = 0

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def items(self) -> list[Ingredient]:
        """The ingredients awaiting review."""
        return list(self._items)

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def can_commit(self) -> bool:
        return self._state is ScanState.REVIEW and bool(self._items)

    def start(self) -> None:
        """Turn the camera on.

        Raises:
            CameraError: If access is denied; the workflow stays IDLE.
        """
        if self._state not in (ScanState.IDLE, ScanState.COMMITTED):
            raise RuntimeError(f"Cannot start a scan while {self._state.value}")

        self._reset()
        camera = self._camera_factory()
        try:
            camera.open()
        except CameraError as e:
            camera.release()
            self._last_error = e
            logger.warning("Camera unavailable: %s", e)
            raise
        self._camera = camera
        self._state = ScanState.CAPTURING

    async def capture(self) -> ScanState:
        """Take the photo, release the camera, and recognize ingredients."""
        if self._state is not ScanState.CAPTURING or self._camera is None:
            raise RuntimeError("No live camera to capture from")

        try:
            image = self._camera.capture_still()
        except CameraError as e:
            self._last_error = e
            self._release_camera()
            self._state = ScanState.IDLE
            raise
        self._release_camera()
        return await self._recognize(image)

    async def process_image(self, image: EncodedImage) -> ScanState:
        """Recognize ingredients in an image that was captured elsewhere."""
        if self._state not in (ScanState.IDLE, ScanState.COMMITTED):
            raise RuntimeError(f"Cannot process an image while {self._state.value}")
        self._reset()
        return await self._recognize(image)

    async def _recognize(self, image: EncodedImage) -> ScanState:
        self._state = ScanState.PROCESSING
        session = self._session
        try:
            items = await self._gateway.recognize_ingredients(image)
        except GatewayError as e:
            if session == self._session:
                logger.warning("Ingredient recognition failed: %s", e)
                self._last_error = e
                self._state = ScanState.IDLE
            return self._state
        except Exception:
            if session == self._session:
                self._state = ScanState.IDLE
            raise

        if session != self._session:
            logger.debug("Scan was abandoned, dropping recognition result")
            return self._state

        self._items = list(items)
        self._state = ScanState.REVIEW
        logger.info("Scan ready for review with %d item(s)", len(self._items))
        return self._state

    def commit(self) -> bool:
        """Add the reviewed items to the pantry.

        Returns False, doing nothing, unless the review list is non-empty.
        """
        if not self.can_commit:
            return False
        self._pantry.add(self._items)
        self._state = ScanState.COMMITTED
        return True

    def cancel(self) -> None:
        """Abandon the scan from any state and release the camera."""
        self._release_camera()
        if self._state is not ScanState.COMMITTED:
            self._reset()

    def _reset(self) -> None:
        self._session += 1
        self._items = []
        self._last_error = None
        self._state = ScanState.IDLE

    def _release_camera(self) -> None:
        if self._camera is not None:
            self._camera.release()
            self._camera = None

    def __enter__(self) -> ScanWorkflow:
        return self

    def __exit__(self, *exc) -> None:
        self.cancel()
