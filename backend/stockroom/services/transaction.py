# Overview: Commit/rollback boundary for ledger mutations.

from __future__ import annotations

import time

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from ..extensions import db
from ..validation import ConflictError


class StorageError(RuntimeError):
    """Raised when the store rejects a write; nothing from the operation was committed."""


def run_in_transaction(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Run ``func`` and commit the session once it returns.

    Every step of a mutation (stock change, log row, alert row, sale rows)
    is flushed inside ``func`` and committed together here. On failure the
    session is rolled back so no caller sees a half-applied mutation.

    OperationalError (locked database, dropped connection) is retried with
    exponential backoff. Unique/check violations become ConflictError and
    other storage errors StorageError. Errors raised by ``func`` itself
    propagate unchanged after rollback.
    """
    for attempt in range(attempts):
        try:
            result = func()
            db.session.commit()
            return result
        except OperationalError as exc:
            db.session.rollback()
            if attempt >= attempts - 1:
                raise StorageError("storage unavailable") from exc
            time.sleep(backoff_base * (2 ** attempt))
        except IntegrityError as exc:
            db.session.rollback()
            raise ConflictError("conflicts with existing data") from exc
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StorageError("storage write failed") from exc
        except Exception:
            db.session.rollback()
            raise
