from django.http import JsonResponse


def health_check(request):
    """Liveness probe."""
    return JsonResponse({'status': 'ok'})


def error_404(request, exception):
    """Unknown URL, reported in the same shape as API errors."""
    return JsonResponse({'detail': 'Not found.', 'code': 'not_found'}, status=404)


def error_500(request):
    """Unhandled failure, reported in the same shape as API errors."""
    return JsonResponse({'detail': 'Internal server error.', 'code': 'server_error'}, status=500)
