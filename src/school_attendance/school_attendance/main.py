from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig

from .container import build_container
from .attendance.controller import register as register_attendance


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if app.config["DEBUG"]:
        print("[school-attendance] settings=", settings_module, " db=", DBConfig.from_mapping(db_config).describe())

    auto_init_db = bool(getattr(settings, "AUTO_INIT_DB", False))
    if auto_init_db:
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        if app.config["DEBUG"]:
            print(f"[school-attendance] schema ready (tables={len(list_tables(db_config))})")

    container = build_container(db_config=db_config)

    register_attendance(app, container)

    return app
