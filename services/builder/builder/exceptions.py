"""Exceptions raised by the form builder."""
from __future__ import annotations


class BuilderError(Exception):
    """Base class for form builder errors."""


class LastPageError(BuilderError):
    def __init__(self) -> None:
        super().__init__("Cannot delete the last page")


class InvalidFieldUpdate(BuilderError):
    """A field patch would break the page/field relationship."""


class InvalidPageName(BuilderError):
    pass


class InvalidImport(BuilderError):
    """An imported document is missing its fields array."""


class StoreError(BuilderError):
    """The storage collaborator failed to read or write a form."""


class FormNotFound(StoreError):
    def __init__(self, form_id: object) -> None:
        super().__init__(f"Form {form_id} not found")
        self.form_id = form_id


class LoadFailed(BuilderError):
    pass


class SaveFailed(BuilderError):
    pass


class SaveInProgress(BuilderError):
    pass


class InvalidDocument(BuilderError):
    """The store refused a form document as invalid."""
