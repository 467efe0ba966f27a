from django.urls import path

from .auth_views import LoginView
from .auth_views import LogoutView
from .auth_views import RefreshView

app_name = "auth"

urlpatterns = [
    path("login/", LoginView.as_view(), name="login"),
    path("refresh/", RefreshView.as_view(), name="refresh"),
    path("logout/", LogoutView.as_view(), name="logout"),
]
