# Overview: Transaction scoping, row locking and retry helpers shared by services.

from __future__ import annotations

import time
from contextlib import contextmanager

from flask import current_app
from sqlalchemy import event, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE; transaction_scope takes the
    database write lock there instead.
    """
    return query.with_for_update()


class PendingWorkError(RuntimeError):
    """A transaction scope was opened over unsaved or flushed-but-uncommitted changes."""


_FLUSHED = "computerstore.flushed"


@event.listens_for(Session, "after_flush")
def _mark_flushed(session, flush_context):
    session.info[_FLUSHED] = True


@event.listens_for(Session, "after_transaction_end")
def _clear_flushed(session, transaction):
    if transaction.parent is None:
        session.info.pop(_FLUSHED, None)


def _has_uncommitted_work(session) -> bool:
    return bool(session.new or session.dirty or session.deleted or session.info.get(_FLUSHED))


@contextmanager
def transaction_scope():
    """
    Explicit unit of work on the Flask-SQLAlchemy session.

    Commits when the block exits normally, rolls back on any exception and
    re-raises it. On SQLite the transaction is opened with BEGIN IMMEDIATE so
    concurrent writers serialize on the database lock for the whole
    read-validate-write sequence.

    A read-only transaction left open by earlier queries is rolled back first.
    If the caller has pending or flushed changes, PendingWorkError is raised
    and the session is left untouched.
    """
    session = db.session()
    if _has_uncommitted_work(session):
        raise PendingWorkError("commit or roll back pending changes before opening a transaction scope")
    if session.in_transaction():
        session.rollback()
    if db.engine.dialect.name == "sqlite":
        session.execute(text("BEGIN IMMEDIATE"))
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Call `func` again when the database reports a lock or version conflict.

    OperationalError covers SQLite "database is locked" and server deadlocks;
    StaleDataError covers a version_id mismatch. Each retry starts from a
    rolled-back session. StoreError and anything else propagate on the first
    failure. The last conflict is re-raised once attempts run out.
    """
    for attempt in range(1, attempts + 1):
        try:
            return func()
        except (OperationalError, StaleDataError) as exc:
            db.session.rollback()
            if attempt >= attempts:
                raise
            current_app.logger.warning(
                "Retrying after %s (attempt %s of %s)", type(exc).__name__, attempt, attempts,
            )
            time.sleep(backoff_base * (2 ** (attempt - 1)))
