from django.urls import path, include
from rest_framework.routers import DefaultRouter
from asset.adapters.viewsets.asset_viewset import AssetViewSet

router = DefaultRouter()
router.register(r'assets', AssetViewSet, basename='asset')

urlpatterns = [
    path('', include(router.urls)),
]
