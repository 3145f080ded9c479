# src/uploads/errors.py
"""
Two families of failures:

InvocationError  -> the whole batch can't be processed; propagate to the runtime.
RecordError      -> one record is skipped; the loop logs it and moves on.
"""

class UploadStatusError(Exception):
    pass


class InvocationError(UploadStatusError):
    pass

class ConfigurationError(InvocationError):
    pass

class DatabaseUnavailable(InvocationError):
    pass

class DatabaseCloseError(InvocationError):
    pass


class RecordError(UploadStatusError):
    severity = "error"
    reason = "record_error"

    def __init__(self, message: str, bucket: str = "", key: str = ""):
        super().__init__(message)
        self.bucket = bucket
        self.key = key

class RecordRejected(RecordError):
    pass

class BucketMismatch(RecordRejected):
    severity = "warning"
    reason = "bucket_mismatch"

class EventNameMismatch(RecordRejected):
    severity = "warning"
    reason = "event_name_mismatch"

class MalformedKey(RecordRejected):
    reason = "malformed_key"

class UpdateFailed(RecordError):
    reason = "update_failed"

class MalformedRecord(RecordRejected):
    reason = "malformed_record"
