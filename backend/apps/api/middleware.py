from django.utils.deprecation import MiddlewareMixin
from rest_framework.renderers import JSONRenderer

from apps.api.validation import validate_request_context
from apps.common import get_logger

logger = get_logger(__name__).bind(component='api', layer='middleware')


def _prepare_for_render(response):
    # Responses returned here never pass through APIView.finalize_response
    response.accepted_renderer = JSONRenderer()
    response.accepted_media_type = response.accepted_renderer.media_type
    response.renderer_context = {}
    return response


class RequestValidationMiddleware(MiddlewareMixin):
    """
    Runs access checks (staff-only catalog writes, authenticated checkout,
    optional identity for carts) before the DRF view is dispatched.
    """

    def process_view(self, request, view_func, view_args, view_kwargs):
        view_class = getattr(view_func, 'view_class', None)
        if view_class is None:
            return None
        response = validate_request_context(request, view_class, view_kwargs)
        if response is None:
            return None
        logger.info(
            'Request rejected before view dispatch',
            view=view_class.__name__,
            method=request.method,
            path=request.path,
            status=response.status_code,
        )
        return _prepare_for_render(response)
