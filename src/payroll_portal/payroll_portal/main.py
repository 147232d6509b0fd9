from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, g, session

from config import get_settings_module

from .database.bootstrap import apply_schema, ensure_demo_accounts, list_tables

from .container import Container, build_container
from .auth.controller import register as register_auth
from .payroll.controller import register as register_payroll

REPO_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    """Build the Flask app.

    Pass ``container`` to run against other backends (tests use in-memory fakes);
    otherwise one is built from the selected settings module.
    """
    load_dotenv(override=False)
    app = Flask(__name__, template_folder=str(REPO_ROOT / "templates"))

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")

    logging.basicConfig(
        level=getattr(logging, str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        if app.config["DEBUG"]:
            print(
                "[payroll-portal] settings=", settings_module,
                " db=", f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
            )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            if app.config["DEBUG"]:
                print(f"[payroll-portal] schema ready (tables={len(list_tables(db_config))})")
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_accounts(db_config)
            if app.config["DEBUG"]:
                print("[payroll-portal] demo accounts ready")

        container = build_container(
            db_config=db_config,
            namespace=getattr(settings, "APP_NAMESPACE", "payroll-app-v1"),
            team_order=str(getattr(settings, "TEAM_ORDER", "")),
            export_enabled=bool(getattr(settings, "EXPORT_ENABLED", True)),
            enumeration_protection=bool(getattr(settings, "AUTH_ENUMERATION_PROTECTION", True)),
        )

    app.extensions["payroll_container"] = container

    @app.before_request
    def resolve_session():
        manager = container.session_manager(session)
        manager.start()
        g.session_manager = manager

    @app.teardown_request
    def release_session(exc):
        manager = g.pop("session_manager", None)
        if manager is not None:
            manager.stop()

    register_auth(app, container)
    register_payroll(app, container)

    return app
