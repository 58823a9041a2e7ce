"""Database models for the form builder service."""
from __future__ import annotations

import secrets
import uuid

from django.db import models

from .layout import DEFAULT_PAGE


def generate_share_key() -> str:
    return secrets.token_hex(8)


def default_pages() -> list:
    return [dict(DEFAULT_PAGE)]


class Form(models.Model):
    """A form definition stored as one document.

    ``fields`` and ``pages`` are written together on every save; the
    builder never updates a single field or page row.
    """

    title = models.CharField(max_length=255, default="Untitled Form")
    settings = models.JSONField(default=dict, blank=True)
    fields = models.JSONField(default=list, blank=True)
    pages = models.JSONField(default=default_pages, blank=True)
    share_key = models.CharField(max_length=32, unique=True, default=generate_share_key, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["title", "id"]

    def __str__(self) -> str:
        return self.title


class FormTemplate(models.Model):
    """A user-defined starting point for new forms."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    fields = models.JSONField(default=list)
    settings = models.JSONField(default=dict, blank=True)
    accent = models.CharField(max_length=16, default="#2563eb")
    owner = models.CharField(max_length=255, blank=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return self.title


class BuilderPreference(models.Model):
    """Per-user display preferences for the form builder."""

    GRID = "grid"
    LIST = "list"

    VIEW_MODES = [
        (GRID, "Grid"),
        (LIST, "List"),
    ]

    user_key = models.CharField(max_length=255, unique=True)
    view_mode = models.CharField(max_length=16, choices=VIEW_MODES, default=GRID)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["user_key"]

    def __str__(self) -> str:
        return f"{self.user_key} ({self.view_mode})"
