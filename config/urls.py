"""Root URL configuration for Roster."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("roster.urls")),
]
