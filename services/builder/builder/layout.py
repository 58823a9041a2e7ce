"""Paginated form layout.

A form is one ordered list of fields. Page-break fields split it into
pages, and an explicit page list (id, name, order) names those pages.
``FormLayout`` is the only place that mutates both lists together, which
keeps ``len(pages) == page_break_count + 1`` after every edit.
"""
from __future__ import annotations

import copy
import logging
import uuid
from dataclasses import dataclass, field as dataclass_field, fields as dataclass_fields
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from .exceptions import InvalidFieldUpdate, InvalidPageName, LastPageError
from .fields import Field, FieldType, apply_patch, create_field, field_from_dict

logger = logging.getLogger(__name__)

DEFAULT_PAGE: Dict[str, Any] = {"id": "1", "name": "Page 1", "order": 0}


def new_page_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Page:
    """One screen of a multi-page form."""

    id: str
    name: str
    order: int
    extra: Dict[str, Any] = dataclass_field(default_factory=dict)

    @classmethod
    def default(cls) -> "Page":
        return cls.from_dict(DEFAULT_PAGE)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Page":
        if not isinstance(data, Mapping) or data.get("id") in (None, ""):
            raise ValueError("A page needs an id.")
        remaining = dict(data)
        page_id = str(remaining.pop("id"))
        name = remaining.pop("name", "")
        order = remaining.pop("order", 0)
        return cls(id=page_id, name=name, order=order, extra=copy.deepcopy(remaining))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "name": self.name, "order": self.order}
        data.update(copy.deepcopy(self.extra))
        return data


class FieldCollection:
    """Ordered fields of a form; list order is display order."""

    def __init__(self, fields: Iterable[Field] = ()) -> None:
        self._fields: List[Field] = list(fields)

    @classmethod
    def from_list(cls, items: Optional[Iterable[Mapping[str, Any]]]) -> "FieldCollection":
        return cls(field_from_dict(item) for item in items or [])

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self._fields)

    def __getitem__(self, index: int) -> Field:
        return self._fields[index]

    def index_of(self, field_id: str) -> int:
        for index, item in enumerate(self._fields):
            if item.id == field_id:
                return index
        return -1

    def get(self, field_id: str) -> Optional[Field]:
        index = self.index_of(field_id)
        return self._fields[index] if index != -1 else None

    def append(self, item: Field) -> Field:
        if self.index_of(item.id) != -1:
            raise ValueError(f"Field id {item.id} is already in use")
        self._fields.append(item)
        return item

    def add_field(self, field_type: Union[str, FieldType], field_id: Optional[str] = None) -> Field:
        return self.append(create_field(field_type, field_id=field_id))

    def update_field(self, field_id: str, patch: Mapping[str, Any]) -> Optional[Field]:
        """Merge ``patch`` into the field with ``field_id``.

        The field object is updated in place unless the new type needs a
        different field class, in which case it is replaced.
        """

        index = self.index_of(field_id)
        if index == -1:
            return None
        current = self._fields[index]
        try:
            updated = apply_patch(current, patch)
        except ValueError as exc:
            raise InvalidFieldUpdate(str(exc)) from exc
        if updated.is_page_break != current.is_page_break:
            raise InvalidFieldUpdate("Page breaks cannot change type; delete and re-add the field instead.")
        if type(updated) is not type(current):
            self._fields[index] = updated
            return updated
        for attribute in dataclass_fields(current):
            setattr(current, attribute.name, getattr(updated, attribute.name))
        return current

    def pop(self, index: int) -> Field:
        return self._fields.pop(index)

    def remove(self, field_id: str) -> Optional[Field]:
        index = self.index_of(field_id)
        if index == -1:
            return None
        return self._fields.pop(index)

    def move_field(self, from_index: int, to_index: int) -> bool:
        """Relocate one field; returns whether anything moved."""

        if from_index == to_index:
            return False
        if not 0 <= from_index < len(self._fields):
            return False
        moved = self._fields.pop(from_index)
        self._fields.insert(to_index, moved)
        return True

    def page_break_positions(self) -> List[int]:
        return [index for index, item in enumerate(self._fields) if item.is_page_break]

    @property
    def page_break_count(self) -> int:
        return len(self.page_break_positions())

    def page_breaks_before(self, index: int) -> int:
        return sum(1 for item in self._fields[:index] if item.is_page_break)

    def to_list(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self._fields]


class PageList:
    """Ordered pages of a form with dense zero-based ``order`` values."""

    def __init__(self, pages: Iterable[Page] = ()) -> None:
        self._pages: List[Page] = list(pages)

    @classmethod
    def from_list(cls, items: Optional[Iterable[Mapping[str, Any]]]) -> "PageList":
        return cls(Page.from_dict(item) for item in items or [])

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self) -> Iterator[Page]:
        return iter(self._pages)

    def __getitem__(self, index: int) -> Page:
        return self._pages[index]

    def index_of(self, page_id: str) -> int:
        for index, page in enumerate(self._pages):
            if page.id == page_id:
                return index
        return -1

    def get(self, page_id: str) -> Optional[Page]:
        index = self.index_of(page_id)
        return self._pages[index] if index != -1 else None

    def add_page(self, page_id: Optional[str] = None) -> Page:
        """Append a page only; the matching page-break is the caller's job."""

        page = Page(
            id=page_id or new_page_id(),
            name=f"Page {len(self._pages) + 1}",
            order=len(self._pages),
        )
        self._pages.append(page)
        return page

    def remove_at(self, index: int) -> Page:
        page = self._pages.pop(index)
        self.renumber()
        return page

    def delete_page(self, page_id: str) -> Optional[Page]:
        if len(self._pages) <= 1:
            raise LastPageError()
        index = self.index_of(page_id)
        if index == -1:
            return None
        return self.remove_at(index)

    def rename_page(self, page_id: str, name: str) -> Optional[Page]:
        if not name or not name.strip():
            raise InvalidPageName("Page name is required.")
        page = self.get(page_id)
        if page is not None:
            page.name = name.strip()
        return page

    def renumber(self) -> None:
        for order, page in enumerate(self._pages):
            page.order = order

    def to_list(self) -> List[Dict[str, Any]]:
        return [page.to_dict() for page in self._pages]


class FormLayout:
    """Keeps the field collection and the page list aligned."""

    def __init__(
        self,
        fields: Optional[FieldCollection] = None,
        pages: Optional[PageList] = None,
    ) -> None:
        self.fields = fields if fields is not None else FieldCollection()
        if pages is None or len(pages) == 0:
            pages = PageList([Page.default()])
        self.pages = pages

    @classmethod
    def from_lists(
        cls,
        fields: Optional[Iterable[Mapping[str, Any]]],
        pages: Optional[Iterable[Mapping[str, Any]]],
    ) -> "FormLayout":
        return cls(FieldCollection.from_list(fields), PageList.from_list(pages))

    @classmethod
    def paginate(cls, fields: Optional[Iterable[Mapping[str, Any]]]) -> "FormLayout":
        """Lay out ``fields`` on as many pages as their page breaks call for."""

        layout = cls(FieldCollection.from_list(fields))
        for _ in range(layout.fields.page_break_count):
            layout.pages.add_page()
        return layout

    def add_field(self, field_type: Union[str, FieldType]) -> Field:
        added = self.fields.add_field(field_type)
        if added.is_page_break:
            page = self.pages.add_page()
            logger.debug("Page break %s opened page %s", added.id, page.id)
        return added

    def update_field(self, field_id: str, patch: Mapping[str, Any]) -> Optional[Field]:
        return self.fields.update_field(field_id, patch)

    def delete_field(self, field_id: str) -> Optional[Field]:
        index = self.fields.index_of(field_id)
        if index == -1:
            return None
        target = self.fields[index]
        if target.is_page_break and len(self.pages) > 1:
            page_index = self.fields.page_breaks_before(index) + 1
            if page_index < len(self.pages):
                page = self.pages.remove_at(page_index)
                logger.debug("Removing page break %s closed page %s", field_id, page.id)
        return self.fields.pop(index)

    def move_field(self, from_index: int, to_index: int) -> bool:
        return self.fields.move_field(from_index, to_index)

    def add_page(self) -> Page:
        page = self.pages.add_page()
        self.fields.add_field(FieldType.PAGE_BREAK, field_id=f"{page.id}-break")
        return page

    def delete_page(self, page_id: str) -> Optional[Page]:
        """Delete a page and the page break that opened it.

        The fields of the deleted page join the preceding page. Deleting the
        first page drops the first page break, so its fields join the page
        that follows.
        """

        if len(self.pages) <= 1:
            raise LastPageError()
        page_index = self.pages.index_of(page_id)
        if page_index == -1:
            return None
        breaks = self.fields.page_break_positions()
        break_index = max(page_index - 1, 0)
        if break_index < len(breaks):
            self.fields.pop(breaks[break_index])
        return self.pages.remove_at(page_index)

    def rename_page(self, page_id: str, name: str) -> Optional[Page]:
        return self.pages.rename_page(page_id, name)

    def count_fields_on_page(self, page_id: str) -> int:
        page_index = self.pages.index_of(page_id)
        if page_index == -1:
            return 0
        if len(self.pages) == 1:
            return sum(1 for item in self.fields if not item.is_page_break)

        breaks_seen = 0
        count = 0
        for item in self.fields:
            if item.is_page_break:
                breaks_seen += 1
                if breaks_seen > page_index:
                    break
                continue
            if breaks_seen == page_index:
                count += 1
        return count

    def is_consistent(self) -> bool:
        orders = [page.order for page in self.pages]
        ids = [item.id for item in self.fields]
        return (
            len(self.pages) == self.fields.page_break_count + 1
            and orders == list(range(len(self.pages)))
            and len(ids) == len(set(ids))
        )

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {"fields": self.fields.to_list(), "pages": self.pages.to_list()}
