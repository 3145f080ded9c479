# src/s3_trigger/handler.py
from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.data_classes import S3Event, event_source
from aws_lambda_powertools.utilities.typing import LambdaContext

from uploads.config import SERVICE_NAME, load_config
from uploads.process import process_batch

logger = Logger(service=SERVICE_NAME)

# leave room to log and close the pool before the runtime kills us
TIMEOUT_MARGIN_MS = 2000
MIN_STATEMENT_TIMEOUT_MS = 1000

def statement_timeout_for(context: LambdaContext):
    remaining = getattr(context, "get_remaining_time_in_millis", None)
    if remaining is None:
        return None
    return max(remaining() - TIMEOUT_MARGIN_MS, MIN_STATEMENT_TIMEOUT_MS)

@logger.inject_lambda_context
@event_source(data_class=S3Event)
def handler(event: S3Event, context: LambdaContext) -> dict:
    config = load_config()
    return process_batch(event, config, statement_timeout_ms=statement_timeout_for(context))
