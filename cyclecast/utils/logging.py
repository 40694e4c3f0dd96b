"""
Shared logging configuration.

Every engine module logs through the structured powertools logger defined
here. Tracebacks are collapsed onto a single line so one rejected input
produces one log record.
"""
import os
import sys
import json
import traceback
from aws_lambda_powertools import Logger

def single_line_trace(exc_info):
    """Render an exception or exc_info tuple as one line, or None when there is nothing to render."""
    if isinstance(exc_info, BaseException):
        exc_info = (type(exc_info), exc_info, exc_info.__traceback__)

    if exc_info and isinstance(exc_info, tuple) and len(exc_info) == 3 and exc_info[0]:
        try:
            trace = ''.join(traceback.format_exception(*exc_info))
            return trace.replace('\n', ' | ').strip()
        except Exception as e:
            return f"Error formatting exception: {str(e)}"
    return None

logger = Logger(
    service=os.environ.get('POWERTOOLS_SERVICE_NAME', 'cyclecast'),
    level=os.environ.get('LOG_LEVEL', 'INFO'),
    json_serializer=json.dumps,
    use_rfc3339=True
)

logger.append_keys(component="engine")

def log_rejected_input(logger, message, error=None, **kwargs):
    """
    Log input the engine refused, with the reason on a single line.

    Args:
        logger: Logger to write to
        message: Log message
        error: Exception that caused the rejection, defaults to the one being handled
        **kwargs: Passed through to the logger; "extra" is merged

    Example:
        >>> try:
        ...     FlowEntry.model_validate(record)
        ... except PydanticValidationError as e:
        ...     log_rejected_input(logger, "Skipping malformed flow record", e, extra={"record": repr(record)})
    """
    extra = kwargs.pop('extra', {})
    extra['exception'] = single_line_trace(error if error is not None else sys.exc_info())
    logger.warning(message, extra=extra, **kwargs)
