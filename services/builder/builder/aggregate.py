"""The form aggregate: title, settings and layout persisted as one document."""
from __future__ import annotations

import copy
from typing import Any, Dict, Mapping, Optional

from django.utils import timezone

from .exceptions import InvalidImport
from .layout import FormLayout

EXPORT_VERSION = "1.0"

DOCUMENT_KEYS = ("title", "settings", "fields", "pages")


class FormAggregate:
    """An editable form.

    ``meta`` carries the record's own keys (id, share key, timestamps).
    They are read back on export but never written by a save.
    """

    def __init__(
        self,
        title: str = "",
        settings: Optional[Mapping[str, Any]] = None,
        layout: Optional[FormLayout] = None,
        meta: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.title = title
        self.settings: Dict[str, Any] = copy.deepcopy(dict(settings or {}))
        self.layout = layout if layout is not None else FormLayout()
        self.meta: Dict[str, Any] = copy.deepcopy(dict(meta or {}))

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "FormAggregate":
        """Build an aggregate from a stored document.

        A document without pages gets the single default page.
        """

        meta = {key: value for key, value in document.items() if key not in DOCUMENT_KEYS}
        return cls(
            title=document.get("title") or "",
            settings=document.get("settings") or {},
            layout=FormLayout.from_lists(document.get("fields"), document.get("pages")),
            meta=meta,
        )

    @property
    def fields(self):
        return self.layout.fields

    @property
    def pages(self):
        return self.layout.pages

    def to_document(self) -> Dict[str, Any]:
        document = copy.deepcopy(self.meta)
        document.update(
            {
                "title": self.title,
                "settings": copy.deepcopy(self.settings),
                "fields": self.layout.fields.to_list(),
                "pages": self.layout.pages.to_list(),
            }
        )
        return document

    def to_export_document(self) -> Dict[str, Any]:
        document = self.to_document()
        document["exportedAt"] = timezone.now().isoformat()
        document["version"] = EXPORT_VERSION
        return document

    def copy(self) -> "FormAggregate":
        return FormAggregate.from_document(self.to_document())

    def apply_import(self, document: Mapping[str, Any]) -> None:
        """Replace this aggregate's content with an imported document.

        Fields are always replaced; pages, settings and title only when the
        document carries them.
        """

        if not isinstance(document, Mapping) or not isinstance(document.get("fields"), list):
            raise InvalidImport("Invalid form data. Missing fields array.")
        pages = document.get("pages")
        if not isinstance(pages, list):
            pages = self.layout.pages.to_list()
        try:
            layout = FormLayout.from_lists(document["fields"], pages)
        except ValueError as exc:
            raise InvalidImport(f"Invalid form data. {exc}") from exc
        ids = [item.id for item in layout.fields]
        if len(ids) != len(set(ids)):
            raise InvalidImport("Invalid form data. Field ids must be unique.")

        self.layout = layout
        if isinstance(document.get("settings"), Mapping):
            self.settings = copy.deepcopy(dict(document["settings"]))
        if document.get("title"):
            self.title = document["title"]
