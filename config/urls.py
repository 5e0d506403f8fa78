"""
URL configuration for piano-diary-back project
"""
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from django.views.generic import RedirectView
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
    SpectacularRedocView,
)


@require_http_methods(["GET"])
def health_view(request):
    """Minimal health check for connectivity verification. No auth required."""
    return JsonResponse({'status': 'ok', 'service': 'piano-diary-back'})


@require_http_methods(["GET"])
def api_root(request):
    """Root endpoint - API information"""
    return JsonResponse({
        'name': 'Piano Diary API',
        'version': '1.0.0',
        'description': 'Lesson calendar, earnings and monthly reports for private music teachers',
        'endpoints': {
            'health': '/api/health/',
            'auth': '/api/auth/',
            'profile': '/api/profile/',
            'students': '/api/students/',
            'pieces': '/api/pieces/',
            'lessons': '/api/lessons/',
            'earnings': '/api/earnings/',
            'reports': '/api/reports/',
            'docs': '/api/docs/',
            'schema': '/api/schema/',
        }
    })


urlpatterns = [
    path('', api_root, name='api-root'),
    path('admin', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api', RedirectView.as_view(url='/api/', permanent=False)),
    path('api/', api_root),
    path('api/health/', health_view, name='api-health'),

    # API Schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),

    # API endpoints
    path('api/auth/', include('accounts.urls')),
    path('api/profile/', include('accounts.urls_profile')),
    path('api/students/', include('students.urls.teacher')),
    path('api/pieces/', include('pieces.urls')),
    path('api/lessons/', include('lessons.urls')),
    path('api/earnings/', include('earnings.urls')),
    path('api/reports/', include('reports.urls')),
]
