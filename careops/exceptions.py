import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def _first_message(data):
    if isinstance(data, dict):
        for value in data.values():
            return _first_message(value)
        return ''
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else ''
    return str(data)


def api_exception_handler(exc, context):
    """Render every API error as ``{"error": message}``.

    Unexpected exceptions are logged with their traceback and reported
    as a generic 500.
    """
    resp = drf_exception_handler(exc, context)
    if resp is None:
        request = context.get('request')
        logger.exception('Unhandled error on %s', getattr(request, 'path', '-'))
        return Response({'error': 'Internal server error'}, status=500)
    data = resp.data
    body = {'error': _first_message(data)}
    if isinstance(data, dict) and 'detail' not in data:
        # serializer field errors
        body['fields'] = data
    return Response(body, status=resp.status_code, headers=_passthrough_headers(resp))


def _passthrough_headers(resp):
    headers = {}
    for name in ('WWW-Authenticate', 'Retry-After'):
        if resp.has_header(name):
            headers[name] = resp[name]
    return headers
