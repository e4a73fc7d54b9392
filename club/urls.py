"""
URL configuration for the club studio backend.
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('summernote/', include('django_summernote.urls')),

    path('api/v1/auth/', include('user.auth_urls')),
    path('api/v1/', include('user.urls')),
    path('api/v1/', include('work.urls')),
    path('api/v1/', include('task.urls')),
    path('api/v1/', include('asset.urls')),
    path('api/v1/', include('dashboard.urls')),

    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]

# Serve uploaded files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
