"""Default form settings and the merge used to apply overrides."""
from __future__ import annotations

import copy
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

DEFAULT_SETTINGS: Mapping[str, Any] = MappingProxyType(
    {
        "theme": "default",
        "allowMultipleSubmissions": True,
        "showProgressBar": True,
        "confirmationMessage": "Thank you for your submission!",
        "backgroundImage": "",
        "pageBackgroundColor": "#f5f5f5",
        "formCardBackgroundColor": "#ffffff",
        "logo": "",
        "showPreviewBeforeSubmit": False,
        "showStartPage": False,
        "startPageTitle": "Welcome",
        "startPageDescription": "",
        "startButtonText": "Start",
        "isPrivateLink": False,
        "allowedEmails": [],
        "fontFamily": "Inter, sans-serif",
        "fontSize": "16px",
        "primaryColor": "#4f46e5",
        "secondaryColor": "#6366f1",
        "textColor": "#1f2937",
        "borderColor": "#e5e7eb",
        "borderRadius": "8px",
        "buttonStyle": "rounded",
        "customCSS": "",
        "formWidth": "100%",
        "maxWidth": "800px",
        "formAlignment": "center",
        "fieldSpacing": "16px",
        "emailNotifications": {
            "enabled": False,
            "notifyOwner": True,
            "notifySubmitter": False,
            "ownerEmail": "",
            "submitterEmailField": "",
        },
    }
)


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    merged = {key: copy.deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _email_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    if value in (None, ""):
        return []
    return [value]


def merge_settings(
    defaults: Optional[Mapping[str, Any]],
    overrides: Optional[Mapping[str, Any]],
) -> Dict[str, Any]:
    """Return ``overrides`` deep-merged over ``defaults``.

    Neither argument is modified; the result shares no mutable state with
    them. ``allowedEmails`` always comes back as a list.
    """

    merged = _deep_merge(defaults or {}, overrides or {})
    merged["allowedEmails"] = _email_list(merged.get("allowedEmails"))
    return merged


def effective_settings(settings: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    return merge_settings(DEFAULT_SETTINGS, settings)


def is_private_link(settings: Optional[Mapping[str, Any]]) -> bool:
    value = (settings or {}).get("isPrivateLink")
    return value is True or value == "true"
