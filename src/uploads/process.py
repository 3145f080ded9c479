# src/uploads/process.py
from typing import Optional

from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.data_classes import S3Event
from aws_lambda_powertools.utilities.data_classes.s3_event import S3EventRecord
from psycopg2.pool import SimpleConnectionPool

from .config import Config, SERVICE_NAME
from .db import UploadsDatabase, open_gateway
from .errors import MalformedRecord, RecordError, UpdateFailed
from .status import update_status
from .validation import sanity_check, split_key

logger = Logger(service=SERVICE_NAME, child=True)

def _record_fields(record: S3EventRecord):
    try:
        fields = record.s3.bucket.name, record.event_name, record.s3.get_object.key
    except (KeyError, TypeError) as e:
        raise MalformedRecord(f"Skipped event with missing field: {e}") from e
    if not all(isinstance(f, str) for f in fields):
        raise MalformedRecord(f"Skipped event with non-string field: {fields!r}")
    return fields

def _log_record_error(err: RecordError):
    fields = {"bucket": err.bucket, "key": err.key, "reason": err.reason}
    if err.severity == "warning":
        logger.warning(str(err), extra=fields)
    else:
        logger.error(str(err), extra=fields)

def _skipped(err: RecordError) -> dict:
    _log_record_error(err)
    return {
        "bucket": err.bucket,
        "key": err.key,
        "outcome": "failed" if isinstance(err, UpdateFailed) else "rejected",
        "reason": err.reason,
        "severity": err.severity,
    }

def process_record(db: UploadsDatabase, record: S3EventRecord, expected_bucket: str) -> dict:
    try:
        bucket, event_name, raw_key = _record_fields(record)
    except MalformedRecord as e:
        return _skipped(e)

    tokens = split_key(raw_key)
    key = "/".join(tokens)
    logger.info(f"Received event '{event_name}' for '{bucket}/{key}'.", extra={"bucket": bucket, "key": key})

    try:
        user_id, object_key = sanity_check(bucket, expected_bucket, event_name, tokens)
        rows_affected, last_update_id = update_status(db, user_id, object_key)
    except RecordError as e:
        e.bucket = e.bucket or bucket
        e.key = e.key or key
        return _skipped(e)

    fields = {"bucket": bucket, "key": key, "rows_affected": rows_affected, "last_update_id": last_update_id}
    logger.info(f"Update done. LastUpdateId: {last_update_id}, RowsAffected: {rows_affected}", extra=fields)
    if rows_affected > 1:
        logger.warning(f"Update matched {rows_affected} upload requests, expected at most one", extra=fields)

    return {"bucket": bucket, "key": key, "outcome": "updated",
            "rows_affected": rows_affected, "last_update_id": last_update_id}

def process_batch(
    event: S3Event,
    config: Config,
    statement_timeout_ms: Optional[int] = None,
    pool_factory=SimpleConnectionPool,
) -> dict:
    """
    Reconcile one delivered batch. Record-level problems are logged and skipped;
    configuration and database lifecycle errors propagate.
    """
    records = list(event.records) if event.get("Records") else []
    logger.info(f"Received '{len(records)}' events.")

    dsn = config.require_connection_string()
    results = []
    with open_gateway(dsn, statement_timeout_ms=statement_timeout_ms, pool_factory=pool_factory) as db:
        for record in records:
            results.append(process_record(db, record, config.file_uploads_bucket_name))

    updated = sum(1 for r in results if r["outcome"] == "updated")
    return {
        "ok": True,
        "received": len(records),
        "updated": updated,
        "skipped": len(results) - updated,
        "results": results,
    }
