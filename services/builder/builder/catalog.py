"""Built-in form templates offered to every user."""
from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

BUILTIN_TEMPLATES: List[Dict[str, Any]] = [
    {
        "id": "contact-form",
        "title": "Contact Form",
        "description": "Simple contact form with name, email, and message",
        "fields": [
            {"id": "name", "type": "text", "label": "Full Name", "required": True, "placeholder": "Enter your full name"},
            {"id": "email", "type": "email", "label": "Email Address", "required": True, "placeholder": "your@email.com"},
            {"id": "phone", "type": "text", "label": "Phone Number", "required": False, "placeholder": "(555) 123-4567"},
            {"id": "message", "type": "textarea", "label": "Message", "required": True, "placeholder": "How can we help you?"},
        ],
        "settings": {
            "theme": "default",
            "allowMultipleSubmissions": True,
            "showProgressBar": False,
            "confirmationMessage": "Thank you for contacting us! We'll get back to you soon.",
        },
        "accent": "#2563eb",
    },
    {
        "id": "service-request",
        "title": "Service Request Form",
        "description": "Request form for field service businesses",
        "fields": [
            {"id": "name", "type": "text", "label": "Your Name", "required": True},
            {"id": "email", "type": "email", "label": "Email", "required": True},
            {"id": "phone", "type": "text", "label": "Phone Number", "required": True},
            {
                "id": "address",
                "type": "textarea",
                "label": "Service Address",
                "required": True,
                "placeholder": "Street address, city, state, zip",
            },
            {
                "id": "serviceType",
                "type": "dropdown",
                "label": "Type of Service",
                "required": True,
                "options": ["Landscaping", "Plumbing", "Electrical", "HVAC", "General Maintenance", "Other"],
            },
            {
                "id": "description",
                "type": "textarea",
                "label": "Service Description",
                "required": True,
                "placeholder": "Please describe the work you need done",
            },
            {"id": "preferredDate", "type": "date", "label": "Preferred Service Date", "required": False},
        ],
        "settings": {
            "theme": "default",
            "allowMultipleSubmissions": False,
            "showProgressBar": True,
            "confirmationMessage": "Your service request has been received! We'll contact you within 24 hours.",
        },
        "accent": "#0ea5e9",
    },
    {
        "id": "customer-feedback",
        "title": "Customer Feedback",
        "description": "Collect customer satisfaction ratings and feedback",
        "fields": [
            {"id": "name", "type": "text", "label": "Your Name", "required": False},
            {"id": "email", "type": "email", "label": "Email (optional)", "required": False},
            {"id": "overallRating", "type": "rating", "label": "Overall Satisfaction", "required": True, "max": 5},
            {"id": "serviceQuality", "type": "rating", "label": "Quality of Service", "required": True, "max": 5},
            {"id": "timeliness", "type": "rating", "label": "Timeliness", "required": True, "max": 5},
            {
                "id": "recommend",
                "type": "radio",
                "label": "Would you recommend us?",
                "required": True,
                "options": ["Yes", "No", "Maybe"],
            },
            {
                "id": "comments",
                "type": "textarea",
                "label": "Additional Comments",
                "required": False,
                "placeholder": "Tell us more about your experience...",
            },
        ],
        "settings": {
            "theme": "default",
            "allowMultipleSubmissions": False,
            "showProgressBar": True,
            "confirmationMessage": "Thank you for your feedback! We appreciate your input.",
        },
        "accent": "#10b981",
    },
]


def builtin_templates() -> List[Dict[str, Any]]:
    return copy.deepcopy(BUILTIN_TEMPLATES)


def find_builtin(template_id: str) -> Optional[Dict[str, Any]]:
    for template in BUILTIN_TEMPLATES:
        if template["id"] == template_id:
            return copy.deepcopy(template)
    return None
