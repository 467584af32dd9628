# votoperu/operations/health_monitor.py

# Liveness check: store connectivity and free disk for the activity log

import os
import shutil
from typing import Dict

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from votoperu.database import store

MIN_FREE_DISK_GB = float(os.getenv("MIN_FREE_DISK_GB", "0.1"))


def _check_db() -> Dict:
    try:
        store.ping()
        return {"ok": True, "dialect": store.dialect_name()}
    except SQLAlchemyError as e:
        current_app.logger.error(f"Health check failed to reach the store: {str(e)}")
        return {"ok": False, "error": str(e)[:120]}


def _check_disk() -> Dict:
    log_dir = current_app.config.get("AUDIT_LOG_DIR", "logs")
    target = log_dir if os.path.isdir(log_dir) else "."
    free_gb = shutil.disk_usage(target).free / (1024**3)
    return {"ok": free_gb >= MIN_FREE_DISK_GB, "free_gb": round(free_gb, 2), "min_required_gb": MIN_FREE_DISK_GB}


def check_health() -> Dict:
    """Aggregate overall service health."""
    db = _check_db()
    disk = _check_disk()
    return {"db": db, "disk": disk, "overall_ok": db["ok"] and disk["ok"]}
