"""Kiosk-style scanner: mark one student's attendance from a webcam.

Usage: python scripts/scan_cli.py STUDENT_ID CLASS_ID [--device 0] [--code TEXT]

Runs the same capture flow a student client does: idle re-checks every
RECHECK_INTERVAL_SECONDS, then one camera scan (or a typed code).
"""

from __future__ import annotations

import argparse
import asyncio
import importlib
import logging
import platform
import sys
from datetime import date
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.qr_attendance.qr_attendance.capture.camera import OpenCVCamera
from src.qr_attendance.qr_attendance.capture.decoder import decode_frame
from src.qr_attendance.qr_attendance.capture.scanner import FrameScanLoop
from src.qr_attendance.qr_attendance.capture.session import ScanSession
from src.qr_attendance.qr_attendance.capture.watcher import PreconditionWatcher
from src.qr_attendance.qr_attendance.container import build_container
from src.qr_attendance.qr_attendance.core.enums import ScanState


async def run(args: argparse.Namespace) -> int:
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        token_ttl_minutes=settings.TOKEN_TTL_MINUTES,
        semester_start=date.fromisoformat(str(settings.SEMESTER_START)),
        public_base_url=settings.PUBLIC_BASE_URL,
    )

    session = ScanSession(
        container.attendance_service,
        student_id=args.student_id,
        class_id=args.class_id,
        device_fingerprint=f"scan_cli/{platform.node()}/{platform.system()}",
    )
    session.subscribe(lambda old, new: print(f"[{old.value} -> {new.value}]"))

    async with PreconditionWatcher(session, interval=settings.RECHECK_INTERVAL_SECONDS) as watcher:
        await watcher.check_once()
        if not session.can_start:
            print(session.message or "Attendance cannot be marked right now.")
            return 1

        if args.code:
            state = session.submit_manual_code(args.code)
        else:
            loop = FrameScanLoop(OpenCVCamera(args.device), decoder=decode_frame)
            state = await session.scan(loop)

    print(session.message)
    return 0 if state == ScanState.SUCCESS else 2


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("student_id")
    parser.add_argument("class_id")
    parser.add_argument("--device", default=0, type=int, help="camera index")
    parser.add_argument("--code", default=None, help="type the code instead of scanning")
    args = parser.parse_args()

    load_dotenv(override=False)
    logging.basicConfig(level=getattr(importlib.import_module(get_settings_module()), "LOG_LEVEL", "INFO"))
    raise SystemExit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
