from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv

from dayflow.config import get_settings_module
from dayflow.database.bootstrap import apply_schema, list_tables
from dayflow.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    target = DBConfig.from_dict(settings.DB_CONFIG)

    schema_path = Path(__file__).resolve().parents[1] / "database" / "schema.sql"
    apply_schema(target, schema_path=schema_path)
    tables = list_tables(target)
    print(
        "OK: Applied schema.sql -> "
        f"{target.user}@{target.host}:{target.port}/{target.database} "
        f"(tables={len(tables)})"
    )


if __name__ == "__main__":
    main()
