from django.http import JsonResponse
from django.urls import Resolver404, resolve


class ApiNotFoundMiddleware:
    """Return the JSON envelope for unknown ``/api/`` routes instead of Django's HTML 404."""
    PREFIX = '/api/'

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        path = request.path or ''
        if path.startswith(self.PREFIX):
            try:
                resolve(path)
            except Resolver404:
                return JsonResponse(
                    {'success': False, 'message': f'Route {path} not found'},
                    status=404,
                )
        return self.get_response(request)
