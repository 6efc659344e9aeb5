# core/logging_config.py
import json
import logging
import time
import traceback
import uuid
from datetime import datetime, timezone

# Sensitive headers to mask
SENSITIVE_HEADERS = {'authorization', 'cookie', 'x-api-key'}

EXTRA_FIELDS = (
    'request_id',
    'user_id',
    'method',
    'path',
    'procedure',
    'status_code',
    'duration_ms',
    'headers',
)


class JSONFormatter(logging.Formatter):
    def __init__(self, service_name='digital-store'):
        super().__init__()
        self.service_name = service_name

    def format(self, record):
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'service':   self.service_name,
            'level':     record.levelname,
            'message':   record.getMessage(),
            'logger':    record.name,
            'module':    record.module,
            'func':      record.funcName,
            'line':      record.lineno,
        }

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_obj[field] = getattr(record, field)

        if record.exc_info:
            log_obj['exception'] = ''.join(traceback.format_exception(*record.exc_info))

        return json.dumps(log_obj, default=str)


class RequestLoggingMiddleware:
    """
    Correlates and times every request.

    Reuses an incoming ``X-Request-ID`` or mints one, exposes it as
    ``request.request_id`` and echoes it on the response.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.logger = logging.getLogger('digital_store.requests')

    def __call__(self, request):
        request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())
        request.request_id = request_id

        start_time = time.monotonic()
        try:
            response = self.get_response(request)
        except Exception:
            duration = (time.monotonic() - start_time) * 1000
            self.log_request(request, 500, duration, request_id, exc_info=True)
            raise

        duration = (time.monotonic() - start_time) * 1000
        self.log_request(request, response.status_code, duration, request_id)

        response['X-Request-ID'] = request_id
        return response

    def log_request(self, request, status_code, duration, request_id, exc_info=None):
        headers = {}
        for k, v in request.headers.items():
            headers[k] = '***' if k.lower() in SENSITIVE_HEADERS else v

        extra = {
            'request_id':  request_id,
            'method':      request.method,
            'path':        request.path,
            'procedure':   getattr(request, 'rpc_procedure', None),
            'status_code': status_code,
            'duration_ms': round(duration, 2),
            'headers':     headers,
            'user_id':     getattr(request, 'rpc_user_id', None),
        }

        if status_code >= 500:
            self.logger.error('Request Failed', extra=extra, exc_info=exc_info)
        elif status_code >= 400:
            self.logger.warning('Request Error', extra=extra)
        else:
            self.logger.info('Request Processed', extra=extra)
