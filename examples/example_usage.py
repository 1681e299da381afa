"""Example: use the service layer directly (without Flask).

Controllers are a thin layer; the attendance and statistics rules live in services.
"""

import importlib
import sys

from config import get_settings_module

from src.qr_attendance.qr_attendance.container import build_container


def main():
    student_id = sys.argv[1] if len(sys.argv) > 1 else "student-1"
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    stats = container.stats_service.student_stats(student_id)
    print(stats.to_dict())

    for entry in container.stats_service.student_history(student_id)[:10]:
        print(entry.to_dict())


if __name__ == "__main__":
    main()
