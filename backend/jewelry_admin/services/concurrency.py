# Overview: Retry helper for writes that can lose a race on the database lock.

from __future__ import annotations

import time

from flask import current_app
from sqlalchemy.exc import OperationalError

from ..extensions import db


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Execute a DB operation, retrying when the database reports it is busy.

    OperationalError covers SQLite "database is locked" and deadlock
    reports from server databases. The session is rolled back before each
    new attempt, so func must redo all of its work.
    """
    for attempt in range(attempts):
        try:
            return func()
        except OperationalError:
            db.session.rollback()
            if attempt >= attempts - 1:
                raise
            delay = backoff_base * (2 ** attempt)
            current_app.logger.warning("Database busy, retrying in %.2fs (attempt %d)", delay, attempt + 1)
            time.sleep(delay)
