from django.urls import path

from . import views

app_name = "web"

urlpatterns = [
    path("", views.home, name="home"),
    path("notifications/", views.notifications_page, name="notifications"),
    path("members/", views.members, name="members"),
    path("treasury/", views.treasury, name="treasury"),
    path("cellar/", views.cellar, name="cellar"),
]
