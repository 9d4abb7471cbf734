"""
services/scanner.py

- 카메라 프레임을 주기적으로 샘플링해 QR 코드를 디코딩하는 스캐너 루프
- 상태: IDLE → REQUESTING_PERMISSION → STREAMING → IDLE (stop 시)
        권한/장치 획득 실패 시 PERMISSION_DENIED (종료 상태, 재시도 없음)
- 같은 페이로드가 디바운스 구간 안에 다시 읽히면 무시 (ScanDebouncer)
- 카메라/디코더/시계는 주입 가능 (기본값: OpenCV VideoCapture / QRCodeDetector)
"""

import enum
import logging
import threading
import time
from typing import Any, Callable, Optional

from config.settings import settings

logger = logging.getLogger(__name__)


class ScannerState(str, enum.Enum):
    IDLE = "idle"
    REQUESTING_PERMISSION = "requesting_permission"
    STREAMING = "streaming"
    PERMISSION_DENIED = "permission_denied"


class CameraPermissionDenied(RuntimeError):
    """카메라를 열 수 없음 (권한 거부 또는 장치 없음)"""


class ScanDebouncer:
    """
    (payload, 만료 시각) 쌍을 들고 있다가 같은 페이로드가 만료 전에 다시 오면 억제.
    만료된 항목은 조회 시점에 정리되므로 별도 타이머가 필요 없음.
    """

    def __init__(self, window_seconds: float = 3.0, clock: Callable[[], float] = time.monotonic):
        self.window_seconds = window_seconds
        self._clock = clock
        self._expiry: dict[str, float] = {}

    def _purge(self, now: float) -> None:
        for payload in [p for p, exp in self._expiry.items() if exp <= now]:
            del self._expiry[payload]

    def is_suppressed(self, payload: str) -> bool:
        now = self._clock()
        self._purge(now)
        return payload in self._expiry

    def accept(self, payload: str) -> bool:
        """전달해야 하면 True (그리고 디바운스 구간 시작), 억제 대상이면 False"""
        if self.is_suppressed(payload):
            return False
        self._expiry[payload] = self._clock() + self.window_seconds
        return True

    def clear(self) -> None:
        self._expiry.clear()


def open_default_camera(index: int):
    import cv2

    return cv2.VideoCapture(index)


class OpenCvQrDecoder:
    def __init__(self):
        import cv2

        self._detector = cv2.QRCodeDetector()

    def decode(self, frame) -> Optional[str]:
        data, _points, _ = self._detector.detectAndDecode(frame)
        return data or None


class QrScanner:
    """
    스캐너 루프. 사용 예:

        with QrScanner(on_scan=handle_payload) as scanner:
            scanner.run_forever()

    on_scan 콜백은 디바운스를 통과한 페이로드마다 한 번 호출됩니다.
    """

    def __init__(
        self,
        on_scan: Callable[[str], Any],
        camera_factory: Optional[Callable[[int], Any]] = None,
        decoder: Any = None,
        camera_index: int | None = None,
        interval_ms: int | None = None,
        debounce_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.on_scan = on_scan
        self.camera_factory = camera_factory or open_default_camera
        self.decoder = decoder
        self.camera_index = settings.CAMERA_INDEX if camera_index is None else camera_index
        self.interval = (settings.SCAN_INTERVAL_MS if interval_ms is None else interval_ms) / 1000
        self.debouncer = ScanDebouncer(
            settings.SCAN_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds,
            clock=clock,
        )
        self.state = ScannerState.IDLE
        self._camera = None
        self._stop_event = threading.Event()

    # ==========================================================
    # 카메라 획득 / 해제
    # ==========================================================
    def start(self) -> None:
        if self.state == ScannerState.PERMISSION_DENIED:
            raise CameraPermissionDenied("Camera access was denied; create a new scanner to retry")
        if self.state == ScannerState.STREAMING:
            return

        self.state = ScannerState.REQUESTING_PERMISSION
        try:
            camera = self.camera_factory(self.camera_index)
        except Exception as e:
            self.state = ScannerState.PERMISSION_DENIED
            logger.error(f"카메라 열기 실패: {e}")
            raise CameraPermissionDenied(f"Camera access denied: {e}") from e

        if camera is None or not camera.isOpened():
            if camera is not None:
                camera.release()
            self.state = ScannerState.PERMISSION_DENIED
            logger.error(f"카메라 접근 거부: index={self.camera_index}")
            raise CameraPermissionDenied(f"Camera {self.camera_index} could not be opened")

        if self.decoder is None:
            self.decoder = OpenCvQrDecoder()
        self._camera = camera
        self._stop_event.clear()
        self.state = ScannerState.STREAMING
        logger.info(f"스캔 시작: camera={self.camera_index}, interval={self.interval}s")

    def stop(self) -> None:
        self._stop_event.set()
        camera, self._camera = self._camera, None
        if camera is not None:
            camera.release()
        self.debouncer.clear()
        if self.state == ScannerState.STREAMING or self.state == ScannerState.REQUESTING_PERMISSION:
            self.state = ScannerState.IDLE
            logger.info("스캔 중지")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False

    # ==========================================================
    # 스캔 루프
    # ==========================================================
    def tick(self) -> Optional[str]:
        """프레임 하나를 읽고 디코딩. 콜백으로 전달한 페이로드를 반환 (없으면 None)"""
        camera = self._camera
        if self.state != ScannerState.STREAMING or camera is None:
            return None

        ok, frame = camera.read()
        if not ok or frame is None:
            return None

        payload = self.decoder.decode(frame)
        if not payload:
            return None

        if not self.debouncer.accept(payload):
            logger.debug(f"디바운스로 무시: {payload}")
            return None

        self.on_scan(payload)
        return payload

    def run_forever(self) -> None:
        """stop() 이 호출될 때까지 interval 마다 tick"""
        if self.state != ScannerState.STREAMING:
            self.start()
        while not self._stop_event.is_set():
            self.tick()
            self._stop_event.wait(self.interval)
