"""Route registration for the form builder service."""
from __future__ import annotations

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import BuilderPreferenceView, FormTemplateViewSet, FormViewSet, health, public_form

router = DefaultRouter()
router.register("forms", FormViewSet, basename="form")
router.register("templates", FormTemplateViewSet, basename="template")

urlpatterns = [
    path("healthz/", health, name="builder-health"),
    path("preferences/<str:user_key>/", BuilderPreferenceView.as_view(), name="builder-preferences"),
    path("public/forms/<str:share_key>/", public_form, name="public-form"),
    path("", include(router.urls)),
]
