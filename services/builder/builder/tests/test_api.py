"""API tests for the form builder service."""
from __future__ import annotations

from typing import Any, Dict, List

from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from builder.models import BuilderPreference, Form, FormTemplate


class FormApiTests(TestCase):
    def setUp(self) -> None:
        self.client = APIClient()

    def create_form(self, **payload: Any) -> Dict[str, Any]:
        payload.setdefault("title", "Intake")
        response = self.client.post(reverse("form-list"), payload, format="json")
        self.assertEqual(response.status_code, 201, response.data)
        return response.data

    def test_create_and_list_forms(self) -> None:
        form = self.create_form(settings={"theme": "dark"})

        self.assertEqual(form["pages"], [{"id": "1", "name": "Page 1", "order": 0}])
        self.assertEqual(form["settings"]["theme"], "dark")
        self.assertEqual(form["settings"]["confirmationMessage"], "Thank you for your submission!")
        self.assertEqual(len(form["share_key"]), 16)

        response = self.client.get(reverse("form-list"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(Form.objects.get().title, "Intake")

    def test_search_by_title(self) -> None:
        self.create_form(title="Intake")
        self.create_form(title="Feedback")

        response = self.client.get(reverse("form-list"), {"search": "feed"})
        self.assertEqual([item["title"] for item in response.data], ["Feedback"])

    def test_create_paginates_page_breaks(self) -> None:
        form = self.create_form(
            fields=[
                {"id": "a", "type": "text", "label": "Name"},
                {"id": "b", "type": "page-break"},
                {"id": "c", "type": "email", "label": "Email"},
            ]
        )
        self.assertEqual([page["order"] for page in form["pages"]], [0, 1])
        self.assertEqual(form["pages"][1]["name"], "Page 2")

    def test_duplicate_field_ids_are_rejected(self) -> None:
        response = self.client.post(
            reverse("form-list"),
            {"title": "Dupes", "fields": [{"id": "a", "type": "text"}, {"id": "a", "type": "email"}]},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("fields", response.data)

    def test_put_round_trip(self) -> None:
        form = self.create_form(
            fields=[
                {"id": "a", "type": "text", "label": "Name", "required": True, "conditionalLogic": {"show": True}},
                {"id": "b", "type": "page-break", "label": "Page Break", "required": False},
            ]
        )
        detail = reverse("form-detail", args=[form["id"]])
        original = self.client.get(detail).data
        document = {key: original[key] for key in ("title", "settings", "fields", "pages")}

        response = self.client.put(detail, document, format="json")
        self.assertEqual(response.status_code, 200)

        reloaded = self.client.get(detail).data
        for key in ("title", "settings", "fields", "pages"):
            self.assertEqual(reloaded[key], original[key])

    def test_put_fields_must_match_stored_pages(self) -> None:
        form = self.create_form(fields=[{"id": "a", "type": "text", "label": "Name"}])
        detail = reverse("form-detail", args=[form["id"]])

        response = self.client.put(
            detail,
            {"title": "Intake", "fields": [{"id": "a", "type": "text"}, {"id": "b", "type": "page-break"}]},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("pages", response.data)
        stored = Form.objects.get(pk=form["id"])
        self.assertEqual([item["id"] for item in stored.fields], ["a"])

    def test_patch_fields_with_matching_pages(self) -> None:
        form = self.create_form()
        detail = reverse("form-detail", args=[form["id"]])

        response = self.client.patch(
            detail,
            {
                "fields": [{"id": "a", "type": "text"}, {"id": "b", "type": "page-break"}],
                "pages": [{"id": "1", "name": "Page 1", "order": 0}, {"id": "2", "name": "Page 2", "order": 1}],
            },
            format="json",
        )

        self.assertEqual(response.status_code, 200, response.data)
        self.assertEqual(len(response.data["pages"]), 2)

    def test_patch_merges_settings(self) -> None:
        form = self.create_form(settings={"theme": "dark"})
        detail = reverse("form-detail", args=[form["id"]])

        response = self.client.patch(
            detail,
            {"settings": {"primaryColor": "#000000", "emailNotifications": {"enabled": True}}},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        settings = response.data["settings"]
        self.assertEqual(settings["theme"], "dark")
        self.assertEqual(settings["primaryColor"], "#000000")
        self.assertTrue(settings["emailNotifications"]["enabled"])
        self.assertTrue(settings["emailNotifications"]["notifyOwner"])

    def test_resolved_settings(self) -> None:
        form = Form.objects.create(title="Bare", settings={"showProgressBar": False})

        response = self.client.get(reverse("form-settings", args=[form.pk]))

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.data["showProgressBar"])
        self.assertEqual(response.data["allowedEmails"], [])

    def test_create_from_builtin_template(self) -> None:
        response = self.client.post(reverse("form-list"), {"template": "contact-form"}, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["title"], "Contact Form")
        self.assertEqual(len(response.data["fields"]), 4)
        self.assertFalse(response.data["settings"]["showProgressBar"])
        self.assertEqual(response.data["settings"]["primaryColor"], "#4f46e5")

    def test_create_from_unknown_template(self) -> None:
        response = self.client.post(reverse("form-list"), {"template": "nope"}, format="json")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(Form.objects.count(), 0)


class FormLayoutApiTests(TestCase):
    def setUp(self) -> None:
        self.client = APIClient()
        self.form = Form.objects.create(title="Layout")

    def url(self, name: str, *args: Any) -> str:
        return reverse(name, args=[self.form.pk, *args])

    def add_field(self, field_type: str) -> Dict[str, Any]:
        response = self.client.post(self.url("form-fields"), {"type": field_type}, format="json")
        self.assertEqual(response.status_code, 201, response.data)
        return response.data

    def pages(self) -> List[Dict[str, Any]]:
        response = self.client.get(self.url("form-pages"))
        self.assertEqual(response.status_code, 200)
        return response.data

    def test_add_field_with_defaults(self) -> None:
        field = self.add_field("number")

        self.assertEqual(field["label"], "Number")
        self.assertEqual(field["max"], 100)
        self.form.refresh_from_db()
        self.assertEqual(self.form.fields[0]["id"], field["id"])

    def test_page_break_adds_page_and_counts(self) -> None:
        self.add_field("short-text")
        self.add_field("page-break")
        self.add_field("email")
        self.add_field("phone")

        pages = self.pages()

        self.assertEqual([page["order"] for page in pages], [0, 1])
        self.assertEqual([page["field_count"] for page in pages], [1, 2])

    def test_update_field(self) -> None:
        field = self.add_field("short-text")

        response = self.client.patch(
            self.url("form-field-detail", field["id"]),
            {"label": "Your name", "required": True},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["label"], "Your name")
        self.form.refresh_from_db()
        self.assertTrue(self.form.fields[0]["required"])

    def test_update_missing_field(self) -> None:
        response = self.client.patch(self.url("form-field-detail", "missing"), {"label": "x"}, format="json")
        self.assertEqual(response.status_code, 404)

    def test_update_cannot_change_page_break_type(self) -> None:
        field = self.add_field("short-text")

        response = self.client.patch(
            self.url("form-field-detail", field["id"]),
            {"type": "page-break"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(len(self.pages()), 1)

    def test_update_with_blank_type(self) -> None:
        field = self.add_field("short-text")

        for blank in ("", None):
            response = self.client.patch(
                self.url("form-field-detail", field["id"]),
                {"type": blank},
                format="json",
            )
            self.assertEqual(response.status_code, 400)

        self.form.refresh_from_db()
        self.assertEqual(self.form.fields[0]["type"], "short-text")

    def test_delete_page_break_field_removes_page(self) -> None:
        self.add_field("short-text")
        page_break = self.add_field("page-break")

        response = self.client.delete(self.url("form-field-detail", page_break["id"]))

        self.assertEqual(response.status_code, 204)
        self.assertEqual(len(self.pages()), 1)
        self.form.refresh_from_db()
        self.assertEqual(len(self.form.fields), 1)

    def test_move_field(self) -> None:
        first = self.add_field("short-text")
        second = self.add_field("email")
        third = self.add_field("phone")

        response = self.client.post(
            self.url("form-move-field"),
            {"from_index": 0, "to_index": 2},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["id"] for item in response.data], [second["id"], third["id"], first["id"]])

    def test_add_rename_and_delete_page(self) -> None:
        response = self.client.post(self.url("form-pages"), {}, format="json")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(len(response.data), 2)
        new_page = response.data[1]

        response = self.client.patch(self.url("form-page-detail", new_page["id"]), {"name": "Details"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["name"], "Details")

        response = self.client.delete(self.url("form-page-detail", new_page["id"]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual([page["id"] for page in response.data], ["1"])
        self.form.refresh_from_db()
        self.assertEqual(self.form.fields, [])

    def test_last_page_cannot_be_deleted(self) -> None:
        response = self.client.delete(self.url("form-page-detail", "1"))

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["detail"], "Cannot delete the last page")
        self.form.refresh_from_db()
        self.assertEqual(self.form.pages, [{"id": "1", "name": "Page 1", "order": 0}])

    def test_delete_unknown_page(self) -> None:
        self.add_field("page-break")
        response = self.client.delete(self.url("form-page-detail", "missing"))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(len(self.pages()), 2)

    def test_rename_requires_name(self) -> None:
        response = self.client.patch(self.url("form-page-detail", "1"), {"name": ""}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_export(self) -> None:
        self.add_field("email")

        response = self.client.get(self.url("form-export"))

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response["Content-Disposition"].startswith('attachment; filename="Layout_'))
        self.assertEqual(response.data["version"], "1.0")
        self.assertIn("exportedAt", response.data)
        self.assertEqual(len(response.data["fields"]), 1)

    def test_import(self) -> None:
        response = self.client.post(
            self.url("form-import"),
            {
                "formData": {
                    "title": "Imported",
                    "fields": [
                        {"id": "x", "type": "text", "label": "Name", "required": True},
                        {"id": "y", "type": "page-break", "label": "Page Break", "required": False},
                    ],
                    "pages": [
                        {"id": "1", "name": "Page 1", "order": 0},
                        {"id": "2", "name": "Page 2", "order": 1},
                    ],
                }
            },
            format="json",
        )

        self.assertEqual(response.status_code, 200, response.data)
        self.form.refresh_from_db()
        self.assertEqual(self.form.title, "Imported")
        self.assertEqual([item["id"] for item in self.form.fields], ["x", "y"])
        self.assertEqual(len(self.form.pages), 2)

    def test_import_with_duplicate_field_ids(self) -> None:
        response = self.client.post(
            self.url("form-import"),
            {"formData": {"fields": [{"id": "x", "type": "text"}, {"id": "x", "type": "email"}]}},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.form.refresh_from_db()
        self.assertEqual(self.form.fields, [])

    def test_import_with_pages_out_of_step(self) -> None:
        response = self.client.post(
            self.url("form-import"),
            {
                "formData": {
                    "fields": [{"id": "x", "type": "text"}, {"id": "y", "type": "page-break"}],
                    "pages": [{"id": "1", "name": "Page 1", "order": 0}],
                }
            },
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.form.refresh_from_db()
        self.assertEqual(self.form.fields, [])

    def test_import_without_fields(self) -> None:
        response = self.client.post(self.url("form-import"), {"formData": {"title": "x"}}, format="json")

        self.assertEqual(response.status_code, 400)
        self.form.refresh_from_db()
        self.assertEqual(self.form.title, "Layout")


class FormTemplateApiTests(TestCase):
    def setUp(self) -> None:
        self.client = APIClient()

    def test_list_builtin_templates(self) -> None:
        response = self.client.get(reverse("template-list"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            [item["id"] for item in response.data],
            ["contact-form", "service-request", "customer-feedback"],
        )

    def test_create_and_delete_custom_template(self) -> None:
        response = self.client.post(
            reverse("template-list"),
            {"title": "Mine", "owner": "u1", "fields": [{"id": "a", "type": "text", "label": "A"}]},
            format="json",
        )
        self.assertEqual(response.status_code, 201, response.data)
        template_id = response.data["id"]

        listed = self.client.get(reverse("template-list"), {"owner": "u1"}).data
        self.assertEqual(len(listed), 4)
        self.assertEqual(listed[-1]["title"], "Mine")
        self.assertEqual(len(self.client.get(reverse("template-list"), {"owner": "u2"}).data), 3)

        response = self.client.post(reverse("form-list"), {"template": template_id}, format="json")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["title"], "Mine")

        response = self.client.delete(reverse("template-detail", args=[template_id]))
        self.assertEqual(response.status_code, 204)
        self.assertEqual(FormTemplate.objects.count(), 0)

    def test_template_needs_fields(self) -> None:
        response = self.client.post(reverse("template-list"), {"title": "Empty", "fields": []}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_builtin_templates_cannot_be_deleted(self) -> None:
        response = self.client.delete(reverse("template-detail", args=["contact-form"]))
        self.assertEqual(response.status_code, 404)


class PreferenceAndPublicApiTests(TestCase):
    def setUp(self) -> None:
        self.client = APIClient()

    def test_view_mode_preference(self) -> None:
        url = reverse("builder-preferences", args=["u1"])

        self.assertEqual(self.client.get(url).data["view_mode"], "grid")
        response = self.client.put(url, {"view_mode": "list"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get(url).data["view_mode"], "list")
        self.assertEqual(BuilderPreference.objects.get().user_key, "u1")

    def test_invalid_view_mode(self) -> None:
        response = self.client.put(reverse("builder-preferences", args=["u1"]), {"view_mode": "tiles"}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_public_form(self) -> None:
        form = Form.objects.create(title="Open", fields=[{"id": "a", "type": "email", "label": "Email"}])

        response = self.client.get(reverse("public-form", args=[form.share_key]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["title"], "Open")
        self.assertNotIn("id", response.data)

    def test_private_form_requires_authentication(self) -> None:
        form = Form.objects.create(title="Closed", settings={"isPrivateLink": True})

        response = self.client.get(reverse("public-form", args=[form.share_key]))

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data, {"detail": "Authentication required"})

    def test_unknown_share_key(self) -> None:
        response = self.client.get(reverse("public-form", args=["missing"]))
        self.assertEqual(response.status_code, 404)

    def test_health(self) -> None:
        response = self.client.get(reverse("builder-health"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {"status": "ok"})
