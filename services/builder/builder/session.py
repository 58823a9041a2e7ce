"""Editing session for a single form.

The session holds the only mutable copy of a form while it is edited.
Every layout change goes through ``FormLayout`` and the whole aggregate is
written back on ``save``. A failed load or save leaves the in-memory copy
as it was so the caller can retry.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from .aggregate import FormAggregate
from .exceptions import InvalidImport, LoadFailed, SaveFailed, SaveInProgress, StoreError
from .fields import Field
from .form_settings import merge_settings
from .layout import FormLayout, Page
from .stores import FormStore

logger = logging.getLogger(__name__)


class FormBuilderSession:
    def __init__(self, store: FormStore) -> None:
        self.store = store
        self.form_id: Any = None
        self.aggregate: Optional[FormAggregate] = None
        self.saving = False

    def load(self, form_id: Any) -> FormAggregate:
        try:
            document = self.store.get(form_id)
        except StoreError as exc:
            logger.exception("Loading form %s failed", form_id)
            raise LoadFailed(f"Failed to load form: {exc}") from exc
        self.form_id = form_id
        self.aggregate = FormAggregate.from_document(document)
        return self.aggregate

    def save(self) -> FormAggregate:
        return self._persist(self._current())

    def _current(self) -> FormAggregate:
        if self.aggregate is None:
            raise LoadFailed("No form is loaded.")
        return self.aggregate

    def _persist(self, aggregate: FormAggregate) -> FormAggregate:
        if self.saving:
            raise SaveInProgress("A save is already in progress.")
        self.saving = True
        try:
            stored = self.store.put(self.form_id, aggregate.to_document())
        except StoreError as exc:
            logger.exception("Saving form %s failed", self.form_id)
            raise SaveFailed(f"Failed to save form: {exc}") from exc
        finally:
            self.saving = False
        self.aggregate = FormAggregate.from_document(stored)
        return self.aggregate

    @property
    def layout(self) -> FormLayout:
        return self._current().layout

    def update_title(self, title: str) -> None:
        self._current().title = title

    def update_settings(self, overrides: Mapping[str, Any]) -> Dict[str, Any]:
        aggregate = self._current()
        aggregate.settings = merge_settings(aggregate.settings, overrides)
        return aggregate.settings

    def add_field(self, field_type: str) -> Field:
        return self.layout.add_field(field_type)

    def update_field(self, field_id: str, patch: Mapping[str, Any]) -> Optional[Field]:
        return self.layout.update_field(field_id, patch)

    def delete_field(self, field_id: str) -> Optional[Field]:
        return self.layout.delete_field(field_id)

    def move_field(self, from_index: int, to_index: int) -> bool:
        return self.layout.move_field(from_index, to_index)

    def add_page(self) -> Page:
        return self.layout.add_page()

    def delete_page(self, page_id: str) -> Optional[Page]:
        return self.layout.delete_page(page_id)

    def rename_page(self, page_id: str, name: str) -> Optional[Page]:
        return self.layout.rename_page(page_id, name)

    def export_document(self) -> Dict[str, Any]:
        return self._current().to_export_document()

    def import_document(
        self,
        document: Mapping[str, Any],
        confirm: Optional[Callable[[], bool]] = None,
    ) -> bool:
        """Replace the form with ``document`` and save it.

        Returns False when ``confirm`` declines. The current form is only
        swapped out once the store accepted the imported one.
        """

        if not isinstance(document, Mapping) or not isinstance(document.get("fields"), list):
            raise InvalidImport("Invalid form file. Missing fields array.")
        if confirm is not None and not confirm():
            return False
        candidate = self._current().copy()
        candidate.apply_import(document)
        self._persist(candidate)
        logger.info("Form %s replaced by an imported document", self.form_id)
        return True
