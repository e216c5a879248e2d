"""URL routes for the roster app."""

from django.urls import path

from . import views

app_name = "roster"

urlpatterns = [
    path("health/", views.health_check, name="health_check"),
    path("status-report/", views.status_report, name="status_report"),
    path("volunteers/<str:handle>/", views.volunteer_detail, name="volunteer_detail"),
]
