"""
scripts/scan_attendance.py

교사용 스캐너 스테이션: 카메라로 학생 QR 코드를 읽어 출결 API 에 전달
실행: python -m scripts.scan_attendance --class-id 1 [--marked-by 2] [--status late]
종료: Ctrl+C
"""

import argparse
import logging

import httpx

from config.settings import settings
from services.scanner import CameraPermissionDenied, QrScanner
from services.station_client import DUPLICATE, MARKED, StationClient

logger = logging.getLogger("scan_attendance")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="QR attendance scanner station")
    parser.add_argument("--class-id", type=int, required=True, help="출결을 기록할 학급 ID")
    parser.add_argument("--marked-by", type=int, default=None, help="기록 교사 사용자 ID")
    parser.add_argument("--status", choices=["present", "absent", "late"], default=None)
    parser.add_argument("--camera", type=int, default=settings.CAMERA_INDEX, help="카메라 장치 번호")
    return parser.parse_args(argv)


def make_handler(client: StationClient, status=None):
    """디바운스를 통과한 페이로드마다 호출되는 콜백"""

    def on_scan(payload: str):
        try:
            result = client.submit_scan(payload, status=status)
        except httpx.HTTPError as e:
            logger.error(f"출결 API 호출 실패: code={payload}, error={e}")
            return None

        if result.outcome == MARKED:
            print(f"✅ 출석 처리: {payload}")
        elif result.outcome == DUPLICATE:
            print(f"ℹ️ 이미 기록됨: {payload}")
        else:
            print(f"❌ 거부됨: {payload} ({result.error_code or result.message})")
        return result

    return on_scan


def main(argv=None):
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    args = parse_args(argv)
    client = StationClient(class_id=args.class_id, marked_by=args.marked_by)
    scanner = QrScanner(on_scan=make_handler(client, args.status), camera_index=args.camera)

    try:
        with scanner:
            print("📷 스캔 시작 (Ctrl+C 로 종료)")
            scanner.run_forever()
    except CameraPermissionDenied as e:
        logger.error(f"카메라를 열 수 없습니다: {e}")
        return 1
    except KeyboardInterrupt:
        print("스캔 종료")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
