"""Field definitions for the form builder.

A field is stored as a flat JSON object (``id``, ``type``, ``label``,
``required`` plus whatever properties its type carries). In Python each
type tag is bound to a dataclass describing those properties, so code that
reads ``NumberField.max`` or ``ChoiceField.options`` works against a known
shape. Keys a class does not model are kept in ``extra`` and written back
unchanged.
"""
from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field as dataclass_field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Type, Union


class FieldType(str, Enum):
    SHORT_TEXT = "short-text"
    LONG_TEXT = "long-text"
    PARAGRAPH = "paragraph"
    DROPDOWN = "dropdown"
    SINGLE_CHOICE = "single-choice"
    MULTIPLE_CHOICE = "multiple-choice"
    NUMBER = "number"
    IMAGE = "image"
    FILE = "file"
    TIME = "time"
    CAPTCHA = "captcha"
    SPINNER = "spinner"
    HEADING = "heading"
    FULL_NAME = "full-name"
    EMAIL = "email"
    ADDRESS = "address"
    PHONE = "phone"
    DATE_PICKER = "date-picker"
    APPOINTMENT = "appointment"
    SIGNATURE = "signature"
    FILL_BLANK = "fill-blank"
    SERVICE_CATEGORY = "service-category"
    PRODUCT_LIST = "product-list"
    INPUT_TABLE = "input-table"
    STAR_RATING = "star-rating"
    SCALE_RATING = "scale-rating"
    DIVIDER = "divider"
    SECTION_COLLAPSE = "section-collapse"
    PAGE_BREAK = "page-break"
    LOGO = "logo"
    # Legacy tags still found in stored forms.
    TEXT = "text"
    TEXTAREA = "textarea"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    DATE = "date"
    RATING = "rating"


DEFAULT_LABELS: Dict[str, str] = {
    FieldType.SHORT_TEXT.value: "Short Text",
    FieldType.LONG_TEXT.value: "Long Text",
    FieldType.PARAGRAPH.value: "Paragraph",
    FieldType.DROPDOWN.value: "Dropdown",
    FieldType.SINGLE_CHOICE.value: "Single Choice",
    FieldType.MULTIPLE_CHOICE.value: "Multiple Choice",
    FieldType.NUMBER.value: "Number",
    FieldType.IMAGE.value: "Image",
    FieldType.FILE.value: "File Upload",
    FieldType.TIME.value: "Time",
    FieldType.CAPTCHA.value: "Captcha",
    FieldType.SPINNER.value: "Spinner",
    FieldType.HEADING.value: "Heading",
    FieldType.FULL_NAME.value: "Full Name",
    FieldType.EMAIL.value: "Email",
    FieldType.ADDRESS.value: "Address",
    FieldType.PHONE.value: "Phone",
    FieldType.DATE_PICKER.value: "Date Picker",
    FieldType.APPOINTMENT.value: "Appointment",
    FieldType.SIGNATURE.value: "Signature",
    FieldType.FILL_BLANK.value: "Fill in the Blank",
    FieldType.SERVICE_CATEGORY.value: "Service Category",
    FieldType.PRODUCT_LIST.value: "Product List",
    FieldType.INPUT_TABLE.value: "Input Table",
    FieldType.STAR_RATING.value: "Star Rating",
    FieldType.SCALE_RATING.value: "Scale Rating",
    FieldType.DIVIDER.value: "Divider",
    FieldType.SECTION_COLLAPSE.value: "Section Collapse",
    FieldType.PAGE_BREAK.value: "Page Break",
    FieldType.LOGO.value: "Logo",
    FieldType.TEXT.value: "Short Text",
    FieldType.TEXTAREA.value: "Long Text",
    FieldType.RADIO.value: "Single Choice",
    FieldType.CHECKBOX.value: "Multiple Choice",
    FieldType.DATE.value: "Date Picker",
    FieldType.RATING.value: "Star Rating",
}

FALLBACK_LABEL = "Field"

# (attribute, wire key) pairs shared by every field type.
BASE_PROPERTIES: Tuple[Tuple[str, str], ...] = (
    ("label", "label"),
    ("required", "required"),
    ("placeholder", "placeholder"),
    ("options", "options"),
)


def _tag(field_type: Union[str, FieldType]) -> str:
    if isinstance(field_type, FieldType):
        return field_type.value
    return str(field_type)


def new_field_id() -> str:
    return uuid.uuid4().hex


def default_label(field_type: Union[str, FieldType]) -> str:
    return DEFAULT_LABELS.get(_tag(field_type), FALLBACK_LABEL)


@dataclass
class Field:
    """A single input control on a form."""

    TYPES: ClassVar[Tuple[str, ...]] = ()
    PROPERTIES: ClassVar[Tuple[Tuple[str, str], ...]] = ()
    DEFAULTS: ClassVar[Dict[str, Any]] = {}

    id: str
    type: str
    label: str = ""
    required: bool = False
    placeholder: Optional[str] = None
    options: Optional[List[Any]] = None
    extra: Dict[str, Any] = dataclass_field(default_factory=dict)

    @property
    def is_page_break(self) -> bool:
        return self.type == FieldType.PAGE_BREAK

    @classmethod
    def properties(cls) -> Tuple[Tuple[str, str], ...]:
        return BASE_PROPERTIES + cls.PROPERTIES

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "type": self.type}
        for attribute, key in self.properties():
            value = getattr(self, attribute)
            if value is not None:
                data[key] = copy.deepcopy(value)
        data.update(copy.deepcopy(self.extra))
        return data


@dataclass
class ChoiceField(Field):
    TYPES = (
        FieldType.DROPDOWN.value,
        FieldType.SINGLE_CHOICE.value,
        FieldType.MULTIPLE_CHOICE.value,
        FieldType.RADIO.value,
        FieldType.CHECKBOX.value,
    )
    DEFAULTS = {"options": ["Option 1", "Option 2"]}


@dataclass
class NumberField(Field):
    TYPES = (FieldType.NUMBER.value,)
    PROPERTIES = (("min", "min"), ("max", "max"), ("step", "step"))
    DEFAULTS = {"min": 0, "max": 100, "step": 1}

    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None


@dataclass
class RatingField(Field):
    TYPES = (FieldType.RATING.value, FieldType.STAR_RATING.value)
    PROPERTIES = (("max", "max"),)
    DEFAULTS = {"max": 5}

    max: Optional[int] = None


@dataclass
class ScaleRatingField(Field):
    TYPES = (FieldType.SCALE_RATING.value,)
    PROPERTIES = (
        ("min", "min"),
        ("max", "max"),
        ("min_label", "minLabel"),
        ("max_label", "maxLabel"),
    )
    DEFAULTS = {"min": 1, "max": 10, "min_label": "Poor", "max_label": "Excellent"}

    min: Optional[int] = None
    max: Optional[int] = None
    min_label: Optional[str] = None
    max_label: Optional[str] = None


@dataclass
class FileUploadField(Field):
    TYPES = (FieldType.FILE.value,)
    PROPERTIES = (("accept", "accept"), ("multiple", "multiple"))
    DEFAULTS = {"accept": "*", "multiple": False}

    accept: Optional[str] = None
    multiple: Optional[bool] = None


@dataclass
class LongTextField(Field):
    TYPES = (FieldType.LONG_TEXT.value, FieldType.TEXTAREA.value)
    PROPERTIES = (("rows", "rows"),)
    DEFAULTS = {"rows": 4}

    rows: Optional[int] = None


@dataclass
class ShortTextField(Field):
    TYPES = (FieldType.SHORT_TEXT.value, FieldType.TEXT.value)
    PROPERTIES = (("max_length", "maxLength"),)
    DEFAULTS = {"max_length": 255}

    max_length: Optional[int] = None


@dataclass
class HeadingField(Field):
    TYPES = (FieldType.HEADING.value,)
    PROPERTIES = (("size", "size"), ("color", "color"), ("align", "align"))
    DEFAULTS = {"size": "24px", "color": "#1f2937", "align": "left"}

    size: Optional[str] = None
    color: Optional[str] = None
    align: Optional[str] = None


@dataclass
class ProductListField(Field):
    TYPES = (FieldType.PRODUCT_LIST.value,)
    PROPERTIES = (("products", "products"),)
    DEFAULTS = {
        "products": [
            {"id": "1", "name": "Product 1", "price": 10.00},
            {"id": "2", "name": "Product 2", "price": 20.00},
        ]
    }

    products: Optional[List[Dict[str, Any]]] = None


@dataclass
class InputTableField(Field):
    TYPES = (FieldType.INPUT_TABLE.value,)
    PROPERTIES = (
        ("rows", "rows"),
        ("columns", "columns"),
        ("row_headers", "rowHeaders"),
        ("column_headers", "columnHeaders"),
    )
    DEFAULTS = {"rows": 3, "columns": 3, "row_headers": [], "column_headers": []}

    rows: Optional[int] = None
    columns: Optional[int] = None
    row_headers: Optional[List[str]] = None
    column_headers: Optional[List[str]] = None


@dataclass
class FillBlankField(Field):
    TYPES = (FieldType.FILL_BLANK.value,)
    PROPERTIES = (("blanks", "blanks"), ("show_correct_answer", "showCorrectAnswer"))
    DEFAULTS = {
        "blanks": [
            {"before": "The capital of France is ", "correctAnswer": "Paris", "after": ""}
        ],
        "show_correct_answer": False,
    }

    blanks: Optional[List[Dict[str, Any]]] = None
    show_correct_answer: Optional[bool] = None


@dataclass
class SectionCollapseField(Field):
    TYPES = (FieldType.SECTION_COLLAPSE.value,)
    PROPERTIES = (("default_expanded", "defaultExpanded"),)
    DEFAULTS = {"default_expanded": False}

    default_expanded: Optional[bool] = None


@dataclass
class LogoField(Field):
    TYPES = (FieldType.LOGO.value,)
    PROPERTIES = (("image_url", "imageUrl"), ("width", "width"), ("height", "height"))
    DEFAULTS = {"image_url": "", "width": 200, "height": 100}

    image_url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass
class ServiceCategoryField(Field):
    TYPES = (FieldType.SERVICE_CATEGORY.value,)
    PROPERTIES = (
        ("allow_multiple_categories", "allowMultipleCategories"),
        ("enable_price_input", "enablePriceInput"),
    )
    DEFAULTS = {"allow_multiple_categories": True, "enable_price_input": False}

    allow_multiple_categories: Optional[bool] = None
    enable_price_input: Optional[bool] = None


@dataclass
class PageBreakField(Field):
    TYPES = (FieldType.PAGE_BREAK.value,)


FIELD_CLASSES: Dict[str, Type[Field]] = {
    tag: klass
    for klass in (
        ChoiceField,
        NumberField,
        RatingField,
        ScaleRatingField,
        FileUploadField,
        LongTextField,
        ShortTextField,
        HeadingField,
        ProductListField,
        InputTableField,
        FillBlankField,
        SectionCollapseField,
        LogoField,
        ServiceCategoryField,
        PageBreakField,
    )
    for tag in klass.TYPES
}


def field_class(field_type: Union[str, FieldType]) -> Type[Field]:
    return FIELD_CLASSES.get(_tag(field_type), Field)


def field_from_dict(data: Mapping[str, Any]) -> Field:
    """Build the typed field for a stored field object.

    Known properties with a ``None`` value stay in ``extra`` so they are
    written back as they were read.
    """

    if not isinstance(data, Mapping):
        raise ValueError("A field must be a JSON object.")
    if data.get("id") in (None, "") or data.get("type") in (None, ""):
        raise ValueError("A field needs an id and a type.")

    remaining = dict(data)
    field_type = _tag(remaining.pop("type"))
    klass = field_class(field_type)
    kwargs: Dict[str, Any] = {"id": str(remaining.pop("id")), "type": field_type}
    for attribute, key in klass.properties():
        if remaining.get(key) is not None:
            kwargs[attribute] = copy.deepcopy(remaining.pop(key))
    kwargs["extra"] = copy.deepcopy(remaining)
    return klass(**kwargs)


def create_field(field_type: Union[str, FieldType], field_id: Optional[str] = None) -> Field:
    """Construct a new field with the defaults of its type."""

    tag = _tag(field_type)
    klass = field_class(tag)
    values = copy.deepcopy(klass.DEFAULTS)
    values.setdefault("options", [])
    return klass(
        id=field_id or new_field_id(),
        type=tag,
        label=default_label(tag),
        required=False,
        placeholder="",
        **values,
    )


def apply_patch(field: Field, patch: Mapping[str, Any]) -> Field:
    """Return a new field with ``patch`` merged over ``field``.

    The patch uses wire keys; its ``id`` is ignored.
    """

    data = field.to_dict()
    data.update({key: copy.deepcopy(value) for key, value in patch.items() if key != "id"})
    return field_from_dict(data)
