"""URL configuration for the form builder service."""
from django.urls import include, path

urlpatterns = [
    path("api/", include("builder.urls")),
]
