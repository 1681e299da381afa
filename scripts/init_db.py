"""Create the configured MySQL database and apply database/schema.sql.

Usage: APP_ENV=production python scripts/init_db.py [--schema PATH]
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.qr_attendance.qr_attendance.database.bootstrap import apply_schema, list_tables


def main() -> None:
    parser = argparse.ArgumentParser(description="Apply the attendance schema")
    parser.add_argument("--schema", default=str(REPO_ROOT / "database" / "schema.sql"))
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=args.schema)
    tables = list_tables(db_config)
    print(f"{db_config.get('database')}@{db_config.get('host')}: {', '.join(sorted(tables))}")


if __name__ == "__main__":
    main()
