"""API views for the form builder service."""
from __future__ import annotations

import logging
import re
import uuid
from typing import Any, Callable, Dict, List

from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view
from rest_framework.exceptions import APIException, NotFound
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .aggregate import FormAggregate
from .catalog import builtin_templates, find_builtin
from .exceptions import BuilderError, LoadFailed, SaveFailed
from .form_settings import effective_settings, is_private_link
from .models import BuilderPreference, Form, FormTemplate
from .serializers import (
    BuilderPreferenceSerializer,
    FieldCreateSerializer,
    FieldMoveSerializer,
    FormImportSerializer,
    FormSerializer,
    FormTemplateSerializer,
    PageRenameSerializer,
    PublicFormSerializer,
)
from .session import FormBuilderSession
from .stores import ModelFormStore

logger = logging.getLogger(__name__)


class GuardViolation(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The requested change is not allowed."
    default_code = "guard_violation"


class PersistenceFailure(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Failed to save form."
    default_code = "persistence_failure"


def _attachment_name(title: str) -> str:
    stem = re.sub(r"[^A-Za-z0-9_.-]+", "_", title or "form").strip("_") or "form"
    return f"{stem}_{int(timezone.now().timestamp() * 1000)}.json"


class FormViewSet(viewsets.ModelViewSet):
    queryset = Form.objects.all()
    serializer_class = FormSerializer
    filter_backends = [SearchFilter, OrderingFilter]
    search_fields = ["title"]
    ordering_fields = ["title", "updated_at"]
    ordering = ["title"]

    def create(self, request: Request, *args, **kwargs):  # type: ignore[override]
        payload: Dict[str, Any] = dict(request.data)
        template_id = payload.pop("template", None)
        if template_id:
            template = _find_template(str(template_id))
            if template is None:
                raise NotFound("Template not found.")
            payload.setdefault("fields", template["fields"])
            payload.setdefault("settings", template["settings"])
            payload.setdefault("title", template["title"])

        serializer = self.get_serializer(data=payload)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        logger.info("Form %s created", serializer.instance.pk)
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    def _edit(self, operation: Callable[[FormBuilderSession], Any]) -> FormBuilderSession:
        """Run ``operation`` against the form's layout and save it.

        A guard violation or a not-found result leaves the stored form
        untouched.
        """

        form = self.get_object()
        session = FormBuilderSession(ModelFormStore())
        try:
            session.load(form.pk)
            result = operation(session)
            if result is None:
                raise NotFound()
            session.save()
        except (LoadFailed, SaveFailed) as exc:
            raise PersistenceFailure(str(exc)) from exc
        except BuilderError as exc:
            raise GuardViolation(str(exc)) from exc
        return session

    def _page_summaries(self, aggregate: FormAggregate) -> List[Dict[str, Any]]:
        summaries = []
        for page in aggregate.pages:
            summary = page.to_dict()
            summary["field_count"] = aggregate.layout.count_fields_on_page(page.id)
            summaries.append(summary)
        return summaries

    @action(detail=True, methods=["get"], url_path="settings", url_name="settings")
    def resolved_settings(self, request, *args, **kwargs):  # type: ignore[override]
        """Settings with every default filled in."""

        form = self.get_object()
        return Response(effective_settings(form.settings))

    @action(detail=True, methods=["get", "post"], url_path="fields", url_name="fields")
    def field_list(self, request, *args, **kwargs):  # type: ignore[override]
        if request.method == "GET":
            form = self.get_object()
            return Response(self.get_serializer(form).data["fields"])

        payload = FieldCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        field_type = payload.validated_data["type"]
        added: Dict[str, Any] = {}

        def add(session: FormBuilderSession):
            created = session.add_field(field_type)
            added["id"] = created.id
            return created

        session = self._edit(add)
        created = session.layout.fields.get(added["id"])
        return Response(created.to_dict(), status=status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=["patch", "delete"],
        url_path=r"fields/(?P<field_id>[^/]+)",
        url_name="field-detail",
    )
    def field_detail(self, request, field_id=None, *args, **kwargs):  # type: ignore[override]
        if request.method == "DELETE":
            self._edit(lambda session: session.delete_field(field_id))
            return Response(status=status.HTTP_204_NO_CONTENT)

        if not isinstance(request.data, dict):
            raise GuardViolation("Expected a JSON object.")
        patch = dict(request.data)
        session = self._edit(lambda session: session.update_field(field_id, patch))
        return Response(session.layout.fields.get(field_id).to_dict())

    @action(detail=True, methods=["post"], url_path="move-field", url_name="move-field")
    def move_field(self, request, *args, **kwargs):  # type: ignore[override]
        payload = FieldMoveSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        from_index = payload.validated_data["from_index"]
        to_index = payload.validated_data["to_index"]
        session = self._edit(lambda session: session.move_field(from_index, to_index))
        return Response(session.aggregate.layout.fields.to_list())

    @action(detail=True, methods=["get", "post"], url_path="pages", url_name="pages")
    def page_list(self, request, *args, **kwargs):  # type: ignore[override]
        if request.method == "GET":
            form = self.get_object()
            aggregate = FormAggregate.from_document(self.get_serializer(form).data)
            return Response(self._page_summaries(aggregate))

        session = self._edit(lambda session: session.add_page())
        return Response(self._page_summaries(session.aggregate), status=status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=["patch", "delete"],
        url_path=r"pages/(?P<page_id>[^/]+)",
        url_name="page-detail",
    )
    def page_detail(self, request, page_id=None, *args, **kwargs):  # type: ignore[override]
        if request.method == "DELETE":
            session = self._edit(lambda session: session.delete_page(page_id))
            return Response(self._page_summaries(session.aggregate))

        payload = PageRenameSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        name = payload.validated_data["name"]
        session = self._edit(lambda session: session.rename_page(page_id, name))
        return Response(session.layout.pages.get(page_id).to_dict())

    @action(detail=True, methods=["get"], url_path="export", url_name="export")
    def export(self, request, *args, **kwargs):  # type: ignore[override]
        form = self.get_object()
        aggregate = FormAggregate.from_document(self.get_serializer(form).data)
        response = Response(aggregate.to_export_document())
        response["Content-Disposition"] = f'attachment; filename="{_attachment_name(form.title)}"'
        return response

    @action(detail=True, methods=["post"], url_path="import", url_name="import")
    def import_form(self, request, *args, **kwargs):  # type: ignore[override]
        payload = FormImportSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        document = payload.validated_data["formData"]
        session = self._edit(lambda session: session.import_document(document))
        return Response(session.aggregate.to_document())


def _find_template(template_id: str) -> Dict[str, Any] | None:
    builtin = find_builtin(template_id)
    if builtin is not None:
        return builtin
    try:
        key = uuid.UUID(template_id)
    except ValueError:
        return None
    template = FormTemplate.objects.filter(pk=key).first()
    if template is None:
        return None
    return dict(FormTemplateSerializer(template).data)


class FormTemplateViewSet(mixins.CreateModelMixin, viewsets.GenericViewSet):
    """Built-in templates plus the templates users saved themselves."""

    queryset = FormTemplate.objects.all()
    serializer_class = FormTemplateSerializer
    lookup_value_regex = "[^/]+"

    def list(self, request: Request, *args, **kwargs):  # type: ignore[override]
        owner = request.query_params.get("owner")
        custom: List[Dict[str, Any]] = []
        if owner:
            custom = list(self.get_serializer(self.get_queryset().filter(owner=owner), many=True).data)
        return Response(builtin_templates() + custom)

    def destroy(self, request: Request, pk: str | None = None, *args, **kwargs):  # type: ignore[override]
        try:
            key = uuid.UUID(str(pk))
        except ValueError as exc:
            raise NotFound("Template not found or it cannot be deleted.") from exc
        template = get_object_or_404(FormTemplate, pk=key)
        template.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class BuilderPreferenceView(APIView):
    """The form builder preferences of one user."""

    def get(self, request: Request, user_key: str) -> Response:
        preference = BuilderPreference.objects.filter(user_key=user_key).first()
        if preference is None:
            preference = BuilderPreference(user_key=user_key)
        return Response(BuilderPreferenceSerializer(preference).data)

    def put(self, request: Request, user_key: str) -> Response:
        preference = BuilderPreference.objects.filter(user_key=user_key).first()
        if preference is None:
            preference = BuilderPreference(user_key=user_key)
        serializer = BuilderPreferenceSerializer(preference, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


@api_view(["GET"])
def public_form(request: Request, share_key: str) -> Response:
    """Serve a shared form to respondents."""

    form = get_object_or_404(Form, share_key=share_key)
    if is_private_link(form.settings):
        return Response({"detail": "Authentication required"}, status=status.HTTP_401_UNAUTHORIZED)
    return Response(PublicFormSerializer(form).data)


@api_view(["GET"])
def health(request):  # type: ignore[override]
    """Readiness endpoint for orchestration tooling."""

    return Response({"status": "ok"})
