# invoice_dashboard/services/validation.py
"""
Form payload validation.

Untyped form submissions (string-keyed maps) become typed payloads, or a
ValidationError whose `field_errors` maps each failing field to its
messages. Whether `customer_id` names an existing customer is checked by
the repository at write time, not here.
"""

import logging
from typing import Any, Dict, List, Mapping, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from invoice_dashboard.core.errors import ValidationError
from invoice_dashboard.schemas.customer import CustomerForm
from invoice_dashboard.schemas.invoice import InvoiceForm
from invoice_dashboard.utils.money import MAX_CENTS, to_display

logger = logging.getLogger(__name__)

FormModel = TypeVar("FormModel", bound=BaseModel)

FIELD_MESSAGES = {
    "name": "Please enter a customer name.",
    "email": "Please enter a valid email address.",
    "image_url": "Please enter an image URL.",
    "customer_id": "Please select a customer.",
    "amount": "Please enter an amount greater than $0.",
    "status": "Please select an invoice status.",
}

# Overrides for a specific pydantic error type on a field
TYPE_MESSAGES = {
    ("amount", "less_than_equal"): f"Please enter an amount of at most {to_display(MAX_CENTS)}.",
}

# Keys accepted in submitted forms besides the field names themselves
FIELD_ALIASES = {
    "imageUrl": "image_url",
    "customerId": "customer_id",
}


def field_errors_from(exc: PydanticValidationError) -> Dict[str, List[str]]:
    """
    Collapses pydantic's error list into one entry per field.

    Known fields get a single user-facing message; anything else keeps
    pydantic's own message.
    """
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("__root__",)
        field = FIELD_ALIASES.get(str(loc[0]), str(loc[0]))
        message = TYPE_MESSAGES.get((field, error.get("type")))
        if message is None:
            message = FIELD_MESSAGES.get(field, error.get("msg", "Invalid value."))
        messages = errors.setdefault(field, [])
        if message not in messages:
            messages.append(message)
    return errors


def _validate(model: Type[FormModel], data: Mapping[str, Any], message: str) -> FormModel:
    try:
        return model.model_validate(dict(data))
    except PydanticValidationError as exc:
        field_errors = field_errors_from(exc)
        logger.debug("Form rejected (%s): %s", model.__name__, field_errors)
        raise ValidationError(field_errors, message) from exc


def validate_customer_form(data: Mapping[str, Any]) -> CustomerForm:
    return _validate(CustomerForm, data, "Missing fields. Failed to save customer.")


def validate_invoice_form(data: Mapping[str, Any]) -> InvoiceForm:
    """
    Raises:
        ValidationError: blank customer, amount not a positive decimal of at
            least one cent and at most MAX_CENTS,
            status not one of pending/paid
    """
    return _validate(InvoiceForm, data, "Missing fields. Failed to save invoice.")
