from django.conf import settings
from django.urls import include
from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from txoko.announcements.api.views import AnnouncementViewSet
from txoko.chat.api.views import ChatRoomViewSet
from txoko.notifications.api.views import NotificationViewSet
from txoko.societies.api.views import SocietyViewSet
from txoko.users.api.views import UserViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("users", UserViewSet)
router.register("societies", SocietyViewSet)
router.register("notifications", NotificationViewSet, basename="notifications")
router.register("announcements", AnnouncementViewSet, basename="announcements")
router.register("chat/rooms", ChatRoomViewSet, basename="chat-rooms")


app_name = "api"
urlpatterns = [
    path("auth/", include("txoko.users.api.auth_urls")),
    *router.urls,
]
