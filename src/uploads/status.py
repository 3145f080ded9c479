# src/uploads/status.py
from typing import Optional, Tuple

import psycopg2

from .errors import UpdateFailed

STATUS_UPLOADED = 2  # status_id = 2 means "uploaded"

UPDATE_STATUS_SQL = f"update UploadRequests set status_id = {STATUS_UPLOADED} where user_id = %s and object_key = %s"
SELECT_STATUS_SQL = "select status_id from UploadRequests where user_id = %s and object_key = %s"

def update_status(db, user_id: str, object_key: str) -> Tuple[int, int]:
    """Mark the upload request as uploaded. Returns (rows_affected, last_update_id)."""
    try:
        rows_affected, last_update_id = db.execute(UPDATE_STATUS_SQL, (user_id, object_key))
    except (psycopg2.Error, ValueError) as e:
        # the driver raises ValueError for values it refuses to bind (e.g. NUL bytes)
        raise UpdateFailed(
            f"Failed to update metadata database for userId '{user_id}' and objectKey '{object_key}': {e}",
            key=f"{user_id}/{object_key}",
        ) from e

    if rows_affected is None or rows_affected < 0:
        raise UpdateFailed(
            f"Failed to get affected rows for userId '{user_id}' and objectKey '{object_key}'",
            key=f"{user_id}/{object_key}",
        )

    # advisory only; postgres reports no id for an UPDATE
    return rows_affected, last_update_id or 0

def fetch_status(db, user_id: str, object_key: str) -> Optional[int]:
    row = db.fetch_one(SELECT_STATUS_SQL, (user_id, object_key))
    return row[0] if row else None
