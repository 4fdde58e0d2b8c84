import logging

from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response

from exports.errors import ExportError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    if isinstance(exc, ExportError):
        return Response({'ok': False, 'error': exc.as_dict()}, status=exc.status_code)
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception("Unhandled error in %s", context.get('view'))
        return Response({'ok': False, 'error': {'kind': 'server', 'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    return Response({'ok': False, 'error': {'kind': 'api', 'code': 'api_error', 'message': detail}}, status=resp.status_code)
