"""Storage collaborators for form aggregates.

A store reads and writes whole form documents; there are no field-level
or page-level updates.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Protocol

import requests
from django.conf import settings
from django.db import DatabaseError, transaction

from .aggregate import DOCUMENT_KEYS
from .exceptions import FormNotFound, InvalidDocument, StoreError
from .models import Form
from .serializers import FormSerializer

logger = logging.getLogger(__name__)


class FormStore(Protocol):
    def get(self, form_id: Any) -> Dict[str, Any]:
        ...

    def put(self, form_id: Any, document: Mapping[str, Any]) -> Dict[str, Any]:
        ...


def _writable(document: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: document[key] for key in DOCUMENT_KEYS if key in document}


class ModelFormStore:
    """Reads and writes ``Form`` rows through the ORM."""

    def get(self, form_id: Any) -> Dict[str, Any]:
        try:
            form = Form.objects.get(pk=form_id)
        except (Form.DoesNotExist, ValueError) as exc:
            raise FormNotFound(form_id) from exc
        except DatabaseError as exc:
            raise StoreError(f"Could not read form {form_id}: {exc}") from exc
        return dict(FormSerializer(form).data)

    def put(self, form_id: Any, document: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            with transaction.atomic():
                form = Form.objects.select_for_update().get(pk=form_id)
                serializer = FormSerializer(form, data=_writable(document))
                if not serializer.is_valid():
                    raise InvalidDocument(f"Form {form_id} was rejected: {serializer.errors}")
                form = serializer.save()
        except (Form.DoesNotExist, ValueError) as exc:
            raise FormNotFound(form_id) from exc
        except DatabaseError as exc:
            raise StoreError(f"Could not write form {form_id}: {exc}") from exc
        logger.info("Form %s saved", form_id)
        return dict(FormSerializer(form).data)


class HttpFormStore:
    """Reads and writes forms through the builder service's REST API."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None) -> None:
        root = base_url or settings.BUILDER_SERVICE_URL
        self.forms_url = root.rstrip("/") + "/api/forms/"
        self.timeout = timeout if timeout is not None else settings.BUILDER_SERVICE_TIMEOUT

    def _request(self, method: str, form_id: Any, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.forms_url}{form_id}/"
        try:
            response = requests.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise StoreError(f"Upstream request failed: {exc}") from exc

        if response.status_code == 404:
            raise FormNotFound(form_id)
        if response.status_code == 400:
            raise InvalidDocument(f"Form {form_id} was rejected: {response.text}")
        if response.status_code >= 400:
            raise StoreError(f"{method} {url} returned {response.status_code}: {response.text}")
        try:
            data = response.json()
        except ValueError as exc:
            raise StoreError(f"{method} {url} returned a non-JSON body") from exc
        if not isinstance(data, dict):
            raise StoreError(f"{method} {url} returned an unexpected payload")
        return data

    def get(self, form_id: Any) -> Dict[str, Any]:
        return self._request("GET", form_id)

    def put(self, form_id: Any, document: Mapping[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", form_id, _writable(document))
