import pytest

from services.scanner import CameraPermissionDenied, QrScanner, ScanDebouncer, ScannerState


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


class FakeCamera:
    """frames 를 순서대로 돌려주고, 다 쓰면 읽기 실패"""

    def __init__(self, frames=(), opened=True):
        self.frames = list(frames)
        self.opened = opened
        self.released = False

    def isOpened(self):
        return self.opened

    def read(self):
        if not self.frames:
            return False, None
        return True, self.frames.pop(0)

    def release(self):
        self.released = True


class EchoDecoder:
    """프레임 자체를 디코딩 결과로 사용 (None 은 QR 없음)"""

    def decode(self, frame):
        return frame


def make_scanner(camera, clock=None, on_scan=None):
    seen = []
    scanner = QrScanner(
        on_scan=on_scan or seen.append,
        camera_factory=lambda index: camera,
        decoder=EchoDecoder(),
        interval_ms=0,
        debounce_seconds=3.0,
        clock=clock or FakeClock(),
    )
    return scanner, seen


# ==========================================================
# 디바운스
# ==========================================================

def test_debouncer_suppresses_repeat_within_window():
    clock = FakeClock()
    debouncer = ScanDebouncer(3.0, clock=clock)

    assert debouncer.accept("QR-1")
    clock.now += 2.9
    assert not debouncer.accept("QR-1")
    assert debouncer.accept("QR-2")


def test_debouncer_forwards_again_after_window():
    clock = FakeClock()
    debouncer = ScanDebouncer(3.0, clock=clock)

    assert debouncer.accept("QR-1")
    clock.now += 3.0
    assert not debouncer.is_suppressed("QR-1")
    assert debouncer.accept("QR-1")


def test_suppressed_read_does_not_extend_window():
    clock = FakeClock()
    debouncer = ScanDebouncer(3.0, clock=clock)

    debouncer.accept("QR-1")
    clock.now += 2.0
    assert not debouncer.accept("QR-1")
    clock.now += 1.5
    assert debouncer.accept("QR-1")


# ==========================================================
# 상태 머신 / 카메라 자원
# ==========================================================

def test_start_and_stop_transitions():
    camera = FakeCamera()
    scanner, _ = make_scanner(camera)
    assert scanner.state == ScannerState.IDLE

    scanner.start()
    assert scanner.state == ScannerState.STREAMING

    scanner.stop()
    assert scanner.state == ScannerState.IDLE
    assert camera.released


def test_unopened_camera_is_permission_denied():
    camera = FakeCamera(opened=False)
    scanner, _ = make_scanner(camera)

    with pytest.raises(CameraPermissionDenied):
        scanner.start()
    assert scanner.state == ScannerState.PERMISSION_DENIED
    assert camera.released

    # 종료 상태: 재시도하지 않고 다시 거부
    with pytest.raises(CameraPermissionDenied):
        scanner.start()
    assert scanner.state == ScannerState.PERMISSION_DENIED


def test_camera_factory_error_is_permission_denied():
    def broken_factory(index):
        raise PermissionError("camera blocked")

    scanner = QrScanner(on_scan=lambda p: None, camera_factory=broken_factory, decoder=EchoDecoder())
    with pytest.raises(CameraPermissionDenied):
        scanner.start()
    assert scanner.state == ScannerState.PERMISSION_DENIED


def test_context_manager_releases_camera_on_error():
    camera = FakeCamera()
    scanner, _ = make_scanner(camera)

    with pytest.raises(RuntimeError):
        with scanner:
            raise RuntimeError("boom")
    assert camera.released
    assert scanner.state == ScannerState.IDLE


# ==========================================================
# 스캔 tick
# ==========================================================

def test_same_payload_within_window_forwarded_once():
    clock = FakeClock()
    camera = FakeCamera(["QR-A", "QR-A", None, "QR-A"])
    scanner, seen = make_scanner(camera, clock=clock)

    with scanner:
        results = [scanner.tick() for _ in range(4)]

    assert seen == ["QR-A"]
    assert results == ["QR-A", None, None, None]


def test_payload_forwarded_again_after_window():
    clock = FakeClock()
    camera = FakeCamera(["QR-A", "QR-A"])
    scanner, seen = make_scanner(camera, clock=clock)

    with scanner:
        scanner.tick()
        clock.now += 3.5
        scanner.tick()

    assert seen == ["QR-A", "QR-A"]


def test_tick_does_nothing_when_not_streaming():
    camera = FakeCamera(["QR-A"])
    scanner, seen = make_scanner(camera)
    assert scanner.tick() is None
    assert seen == []


def test_run_forever_until_stopped():
    camera = FakeCamera([None, "QR-A", "QR-B"])
    seen = []
    scanner, _ = make_scanner(camera)

    def on_scan(payload):
        seen.append(payload)
        if payload == "QR-B":
            scanner.stop()

    scanner.on_scan = on_scan
    scanner.run_forever()

    assert seen == ["QR-A", "QR-B"]
    assert scanner.state == ScannerState.IDLE
    assert camera.released
