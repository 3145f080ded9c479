#!/usr/bin/env python3
# tools/replay_upload.py
"""
Replay an upload notification for one (user_id, object_key) against the
configured metadata database and print the resulting status_id.

  FA_DATABASE_CONNECTION_STRING=... FA_FILE_UPLOADS_BUCKET_NAME=uploads \
      python tools/replay_upload.py alice report.pdf
"""
import sys, json, argparse
from pathlib import Path
from urllib.parse import quote_plus

# --- repo imports (works regardless of CWD)
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from aws_lambda_powertools.utilities.data_classes import S3Event
from psycopg2.pool import SimpleConnectionPool

from uploads.config import load_config
from uploads.db import open_gateway
from uploads.errors import InvocationError
from uploads.process import process_batch
from uploads.status import fetch_status
from uploads.validation import EXPECTED_EVENT_NAME

def build_event(bucket: str, user_id: str, object_key: str, event_name: str = EXPECTED_EVENT_NAME) -> dict:
    key = quote_plus(f"{user_id}/{object_key}", safe="/")
    return {"Records": [{
        "eventName": event_name,
        "s3": {"bucket": {"name": bucket}, "object": {"key": key}},
    }]}

def main(argv=None, pool_factory=SimpleConnectionPool) -> int:
    ap = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    ap.add_argument("user_id")
    ap.add_argument("object_key")
    ap.add_argument("--bucket", help="defaults to FA_FILE_UPLOADS_BUCKET_NAME")
    ap.add_argument("--event-name", default=EXPECTED_EVENT_NAME)
    args = ap.parse_args(argv)

    config = load_config()
    bucket = args.bucket or config.file_uploads_bucket_name
    event = S3Event(build_event(bucket, args.user_id, args.object_key, args.event_name))

    try:
        summary = process_batch(event, config, pool_factory=pool_factory)
        with open_gateway(config.require_connection_string(), pool_factory=pool_factory) as db:
            status_id = fetch_status(db, args.user_id, args.object_key)
    except InvocationError as e:
        print(f"replay failed: {e}", file=sys.stderr)
        return 1

    print(json.dumps({"summary": summary, "status_id": status_id}, indent=2))
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
