"""Serializers for the form builder service."""
from __future__ import annotations

from typing import Any, Dict, List

from rest_framework import serializers

from .form_settings import DEFAULT_SETTINGS, merge_settings
from .layout import DEFAULT_PAGE, FieldCollection, FormLayout, PageList
from .models import BuilderPreference, Form, FormTemplate


class FieldListField(serializers.Field):
    """A JSON list of field definitions, normalised through the field registry."""

    default_error_messages = {
        "not_a_list": "Expected a list of fields.",
        "duplicate": "Field id {field_id} is used more than once.",
    }

    def to_internal_value(self, data: Any) -> List[Dict[str, Any]]:
        if not isinstance(data, list):
            self.fail("not_a_list")
        try:
            collection = FieldCollection.from_list(data)
        except ValueError as exc:
            raise serializers.ValidationError(str(exc)) from exc
        seen = set()
        for item in collection:
            if item.id in seen:
                self.fail("duplicate", field_id=item.id)
            seen.add(item.id)
        return collection.to_list()

    def to_representation(self, value: Any) -> List[Dict[str, Any]]:
        return list(value or [])


class PageListField(serializers.Field):
    default_error_messages = {
        "not_a_list": "Expected a list of pages.",
    }

    def to_internal_value(self, data: Any) -> List[Dict[str, Any]]:
        if not isinstance(data, list):
            self.fail("not_a_list")
        try:
            return PageList.from_list(data).to_list()
        except ValueError as exc:
            raise serializers.ValidationError(str(exc)) from exc

    def to_representation(self, value: Any) -> List[Dict[str, Any]]:
        return list(value or [])


class FormSerializer(serializers.ModelSerializer):
    fields = FieldListField(required=False)
    pages = PageListField(required=False)

    class Meta:
        model = Form
        fields = [
            "id",
            "title",
            "settings",
            "fields",
            "pages",
            "share_key",
            "created_at",
            "updated_at",
        ]

    def validate_settings(self, value: Any) -> Dict[str, Any]:
        if not isinstance(value, dict):
            raise serializers.ValidationError("Must be a JSON object.")
        return value

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        fields = attrs.get("fields")
        pages = attrs.get("pages")
        if fields is None and pages is None:
            return attrs
        if self.instance is None and pages is None:
            # create() lays the fields out on pages.
            return attrs
        if self.instance is not None:
            fields = fields if fields is not None else self.instance.fields
            pages = pages if pages is not None else self.instance.pages
        layout = FormLayout.from_lists(fields, pages)
        breaks = layout.fields.page_break_count
        if len(layout.pages) != breaks + 1:
            raise serializers.ValidationError(
                {"pages": f"Expected {breaks + 1} pages for {breaks} page breaks, got {len(layout.pages)}."}
            )
        return attrs

    def to_representation(self, instance):  # type: ignore[override]
        data = super().to_representation(instance)
        if not data.get("pages"):
            data["pages"] = [dict(DEFAULT_PAGE)]
        return data

    def create(self, validated_data):  # type: ignore[override]
        validated_data["settings"] = merge_settings(DEFAULT_SETTINGS, validated_data.get("settings"))
        if "pages" not in validated_data:
            layout = FormLayout.paginate(validated_data.get("fields"))
            validated_data["pages"] = layout.pages.to_list()
        return super().create(validated_data)

    def update(self, instance, validated_data):  # type: ignore[override]
        if self.partial and "settings" in validated_data:
            validated_data["settings"] = merge_settings(instance.settings, validated_data["settings"])
        return super().update(instance, validated_data)


class PublicFormSerializer(FormSerializer):
    class Meta(FormSerializer.Meta):
        fields = ["title", "settings", "fields", "pages", "share_key"]


class FieldCreateSerializer(serializers.Serializer):
    type = serializers.CharField(max_length=64)


class FieldMoveSerializer(serializers.Serializer):
    from_index = serializers.IntegerField()
    to_index = serializers.IntegerField()


class PageRenameSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)


class FormImportSerializer(serializers.Serializer):
    formData = serializers.JSONField()

    def validate_formData(self, value: Any) -> Dict[str, Any]:
        if not isinstance(value, dict) or not isinstance(value.get("fields"), list):
            raise serializers.ValidationError("Invalid form data. Missing fields array.")
        return value


class FormTemplateSerializer(serializers.ModelSerializer):
    fields = FieldListField()

    class Meta:
        model = FormTemplate
        fields = [
            "id",
            "title",
            "description",
            "fields",
            "settings",
            "accent",
            "owner",
            "created_at",
        ]

    def validate_fields(self, value: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if not value:
            raise serializers.ValidationError("Template title and at least one field are required.")
        return value


class BuilderPreferenceSerializer(serializers.ModelSerializer):
    class Meta:
        model = BuilderPreference
        fields = ["user_key", "view_mode", "updated_at"]
        read_only_fields = ["user_key", "updated_at"]
