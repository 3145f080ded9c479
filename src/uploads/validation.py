# src/uploads/validation.py
from typing import List, Tuple
from urllib.parse import unquote_plus

from .errors import BucketMismatch, EventNameMismatch, MalformedKey

EXPECTED_EVENT_NAME = "ObjectCreated:Put"
KEY_PARTS = 2

def split_key(raw_key: str) -> List[str]:
    # S3 notifications carry URL-encoded keys ("+" for space, %XX escapes)
    return unquote_plus(raw_key).split("/")

def sanity_check(bucket: str, expected_bucket: str, event_name: str, key_tokens: List[str]) -> Tuple[str, str]:
    """
    Raise the first failing rejection, in order: bucket, event name, key shape.
    Returns the (user_id, object_key) tuple when the record is accepted.
    """
    key = "/".join(key_tokens)
    # an unconfigured bucket accepts nothing
    if not expected_bucket or bucket != expected_bucket:
        raise BucketMismatch(
            f"Skipped event because of bucket mismatch. Expected: '{expected_bucket}', Actual: '{bucket}'",
            bucket=bucket, key=key,
        )

    if event_name != EXPECTED_EVENT_NAME:
        raise EventNameMismatch(
            f"Skipped event because of eventName mismatch. Expected: '{EXPECTED_EVENT_NAME}', Actual: '{event_name}'",
            bucket=bucket, key=key,
        )

    if len(key_tokens) != KEY_PARTS:
        raise MalformedKey(
            f"Object key has the wrong number of parts. Expected: {KEY_PARTS}, Actual: {len(key_tokens)}, {key_tokens}",
            bucket=bucket, key=key,
        )

    return key_tokens[0], key_tokens[1]
