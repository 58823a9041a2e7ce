# Generated manually for initial schema.
from __future__ import annotations

import uuid

from django.db import migrations, models

import builder.models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Form",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(default="Untitled Form", max_length=255)),
                ("settings", models.JSONField(blank=True, default=dict)),
                ("fields", models.JSONField(blank=True, default=list)),
                ("pages", models.JSONField(blank=True, default=builder.models.default_pages)),
                (
                    "share_key",
                    models.CharField(default=builder.models.generate_share_key, editable=False, max_length=32, unique=True),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["title", "id"]},
        ),
        migrations.CreateModel(
            name="FormTemplate",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("fields", models.JSONField(default=list)),
                ("settings", models.JSONField(blank=True, default=dict)),
                ("accent", models.CharField(default="#2563eb", max_length=16)),
                ("owner", models.CharField(blank=True, db_index=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["created_at", "id"]},
        ),
        migrations.CreateModel(
            name="BuilderPreference",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_key", models.CharField(max_length=255, unique=True)),
                (
                    "view_mode",
                    models.CharField(choices=[("grid", "Grid"), ("list", "List")], default="grid", max_length=16),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["user_key"]},
        ),
    ]
