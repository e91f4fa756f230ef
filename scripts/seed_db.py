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

from src.campus_attendance.campus_attendance.database.bootstrap import DEFAULT_ACCOUNTS, ensure_defaults


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())

    parser = argparse.ArgumentParser(description="Create the default accounts and parking lot.")
    parser.add_argument(
        "--total-spaces",
        type=int,
        default=int(getattr(settings, "DEFAULT_TOTAL_SPACES", 100)),
        help="parking spaces to create when no parking row exists yet",
    )
    args = parser.parse_args()

    db_config = dict(settings.DB_CONFIG)
    ensure_defaults(db_config, total_spaces=args.total_spaces)

    print(f"seeded {db_config.get('database')}: parking={args.total_spaces} spaces (existing row kept)")
    for username, _password, role in DEFAULT_ACCOUNTS:
        print(f"  account {username} ({role})")


if __name__ == "__main__":
    main()
