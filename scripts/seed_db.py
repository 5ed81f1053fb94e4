from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv

from dayflow.config import get_settings_module
from dayflow.database.bootstrap import apply_seed_sql, ensure_demo_users
from dayflow.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    target = DBConfig.from_dict(settings.DB_CONFIG)

    ensure_demo_users(target)
    seed_path = Path(__file__).resolve().parents[1] / "database" / "seed.sql"
    apply_seed_sql(target, seed_path=seed_path)

    print(f"OK: Seeded database -> {target.user}@{target.host}:{target.port}/{target.database}")


if __name__ == "__main__":
    main()
