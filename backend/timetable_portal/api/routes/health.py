from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from timetable_portal.db.bootstrap import missing_schema_items
from timetable_portal.db.session import engine

router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/health/live")
def health_live() -> dict:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/health/ready")
def health_ready() -> JSONResponse:
    database: dict = {
        "ok": True,
        "schema_ok": False,
        "missing_tables": [],
        "missing_columns": {},
        "error": None,
    }
    period_settings = {"saved": False, "version": 0}

    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
            missing_tables, missing_columns = missing_schema_items(connection)
            database.update(missing_tables=missing_tables, missing_columns=missing_columns)
            database["schema_ok"] = not missing_tables and not missing_columns
            if database["schema_ok"]:
                version = connection.execute(text("SELECT version FROM period_settings WHERE id = 1")).scalar()
                # Unsaved settings are served from defaults; that is still ready.
                period_settings = {"saved": version is not None, "version": version or 0}
    except Exception as exc:  # pragma: no cover - environment dependent
        database["ok"] = False
        database["error"] = str(exc)

    ready = database["ok"] and database["schema_ok"]
    payload = {
        "status": "ok" if ready else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": database,
        "period_settings": period_settings,
    }
    return JSONResponse(status_code=200 if ready else 503, content=payload)
