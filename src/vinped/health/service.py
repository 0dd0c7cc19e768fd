from __future__ import annotations

import time

from vinped.commons.clock import utcnow
from vinped.health import repository

_STARTED = time.monotonic()


def uptime_s() -> float:
    return round(time.monotonic() - _STARTED, 3)


async def get_health_payload() -> dict:
    db_ok, db_detail = await repository.check_db()

    # The API cannot serve anything useful without the database.
    status = "ok" if db_ok else "degraded"

    return {
        "status": status,
        "timestamp": utcnow(),
        "uptime_s": uptime_s(),
        "db": {
            "ok": db_ok,
            "detail": db_detail,
        },
    }
