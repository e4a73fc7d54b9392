from django.urls import path
from .adapters.viewsets import auth_viewset
from .adapters.viewsets.auth_refresh import CookieTokenRefreshView

urlpatterns = [
    # URL for registering a new account
    path('register/', auth_viewset.AuthViewSet.as_view({'post': 'register'}), name='register'),
    # URL for logging in with email
    path('login/', auth_viewset.AuthViewSet.as_view({'post': 'login'}), name='login'),
    # URL for the current user
    path('me/', auth_viewset.AccountViewSet.as_view({'get': 'me'}), name='me'),
    # URL for updating the current user's profile
    path('profile/', auth_viewset.AccountViewSet.as_view({'put': 'update_profile', 'patch': 'update_profile'}), name='profile'),
    # URL for changing password
    path('change-password/', auth_viewset.AccountViewSet.as_view({'post': 'change_password', 'put': 'change_password'}), name='change_password'),
    # URL for logging out
    path('logout/', auth_viewset.AccountViewSet.as_view({'post': 'logout'}), name='logout'),

    # new access cookie from the refresh cookie
    path('token/refresh/', CookieTokenRefreshView.as_view(), name='token_refresh'),
]
