# invoice_dashboard/services/actions.py
"""
Form actions: the write-side boundary a page renderer calls with a raw
form submission.

Every action returns an ActionState. Validation failures carry per-field
messages; store failures are logged and reduced to a generic message so
no database detail reaches the page. A failed write is never reported as
success.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from invoice_dashboard.core.errors import DashboardError, InvalidCredentialsError, ValidationError
from invoice_dashboard.crud.factory import Repositories
from invoice_dashboard.services.auth import CredentialVerifier
from invoice_dashboard.services.validation import validate_customer_form, validate_invoice_form

logger = logging.getLogger(__name__)


@dataclass
class ActionState:
    errors: Dict[str, List[str]] = field(default_factory=dict)
    message: Optional[str] = None
    ok: bool = False
    record_id: Optional[str] = None

    @classmethod
    def success(cls, message: Optional[str] = None, record_id: Optional[str] = None) -> "ActionState":
        return cls(message=message, ok=True, record_id=record_id)


def _invalid(exc: ValidationError, verb: str, entity: str) -> ActionState:
    return ActionState(errors=exc.field_errors, message=f"Missing fields. Failed to {verb} {entity}.")


def _failed(exc: DashboardError, verb: str, entity: str) -> ActionState:
    logger.error("Database error: failed to %s %s: %s", verb, entity, exc)
    return ActionState(message=f"Database error: failed to {verb} {entity}.")


class FormActions:

    def __init__(self, repositories: Repositories, bcrypt_rounds: Optional[int] = None):
        self.repositories = repositories
        self.verifier = CredentialVerifier(repositories.users, rounds=bcrypt_rounds)

    # -----------------------------------------------------
    # Sign-in
    # -----------------------------------------------------
    def authenticate(self, form: Mapping[str, Any]) -> ActionState:
        try:
            user = self.verifier.verify(form.get("email") or "", form.get("password") or "")
        except InvalidCredentialsError:
            return ActionState(message="Invalid credentials.")
        except DashboardError as exc:
            logger.error("Sign-in failed: %s", exc)
            return ActionState(message="Something went wrong.")
        return ActionState.success(record_id=user.id)

    # -----------------------------------------------------
    # Customers
    # -----------------------------------------------------
    def create_customer(self, form: Mapping[str, Any]) -> ActionState:
        try:
            payload = validate_customer_form(form)
            customer = self.repositories.customers.create(payload)
        except ValidationError as exc:
            return _invalid(exc, "create", "customer")
        except DashboardError as exc:
            return _failed(exc, "create", "customer")
        return ActionState.success("Created customer.", customer.id)

    def update_customer(self, customer_id: str, form: Mapping[str, Any]) -> ActionState:
        try:
            payload = validate_customer_form(form)
            self.repositories.customers.update(customer_id, payload)
        except ValidationError as exc:
            return _invalid(exc, "update", "customer")
        except DashboardError as exc:
            return _failed(exc, "update", "customer")
        return ActionState.success("Updated customer.", customer_id)

    def delete_customer(self, customer_id: str) -> ActionState:
        try:
            self.repositories.customers.delete(customer_id)
        except DashboardError as exc:
            return _failed(exc, "delete", "customer")
        return ActionState.success("Deleted customer.", customer_id)

    # -----------------------------------------------------
    # Invoices
    # -----------------------------------------------------
    def create_invoice(self, form: Mapping[str, Any]) -> ActionState:
        try:
            payload = validate_invoice_form(form)
            invoice = self.repositories.invoices.create(payload)
        except ValidationError as exc:
            return _invalid(exc, "create", "invoice")
        except DashboardError as exc:
            return _failed(exc, "create", "invoice")
        return ActionState.success("Created invoice.", invoice.id)

    def update_invoice(self, invoice_id: str, form: Mapping[str, Any]) -> ActionState:
        try:
            payload = validate_invoice_form(form)
            self.repositories.invoices.update(invoice_id, payload)
        except ValidationError as exc:
            return _invalid(exc, "update", "invoice")
        except DashboardError as exc:
            return _failed(exc, "update", "invoice")
        return ActionState.success("Updated invoice.", invoice_id)

    def delete_invoice(self, invoice_id: str) -> ActionState:
        try:
            self.repositories.invoices.delete(invoice_id)
        except DashboardError as exc:
            return _failed(exc, "delete", "invoice")
        return ActionState.success("Deleted invoice.", invoice_id)
