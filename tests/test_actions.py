from decimal import Decimal

import pytest

from invoice_dashboard.services.actions import FormActions
from invoice_dashboard.utils.search import SearchFilter


@pytest.fixture
def actions(repositories, settings):
    return FormActions(repositories, bcrypt_rounds=settings.bcrypt_rounds)


class TestInvoiceActions:

    def test_create_invoice(self, actions, repositories, dataset):
        state = actions.create_invoice({"customerId": dataset.lee.id, "amount": "50.00", "status": "pending"})

        assert state.ok
        assert state.errors == {}
        assert repositories.invoices.get_by_id(state.record_id).amount == Decimal("50")

    def test_invalid_submission_returns_field_errors(self, actions, repositories, dataset):
        """
        GIVEN: An empty invoice form
        WHEN: Submitted
        THEN:
            - No invoice is written
            - Errors per field plus the summary message
        """
        state = actions.create_invoice({})

        assert not state.ok
        assert state.message == "Missing fields. Failed to create invoice."
        assert state.errors["customer_id"] == ["Please select a customer."]
        assert set(state.errors) == {"customer_id", "amount", "status"}
        assert repositories.invoices.count_all() == 4

    def test_unknown_customer_is_a_generic_database_error(self, actions, repositories, dataset):
        state = actions.create_invoice({"customerId": "missing", "amount": "5", "status": "paid"})

        assert not state.ok
        assert state.errors == {}
        assert state.message == "Database error: failed to create invoice."
        assert repositories.invoices.count_all() == 4

    def test_amount_too_large_for_the_store(self, actions, repositories, dataset):
        """
        GIVEN: An amount far beyond what the amount column holds
        WHEN: Submitted
        THEN: A field error on amount; the store is never reached
        """
        state = actions.create_invoice({"customerId": dataset.lee.id, "amount": "1e18", "status": "paid"})

        assert not state.ok
        assert state.message == "Missing fields. Failed to create invoice."
        assert state.errors == {"amount": ["Please enter an amount of at most $21,474,836.47."]}
        assert repositories.invoices.count_all() == 4

    def test_sub_cent_amount_is_rejected(self, actions, repositories, dataset):
        state = actions.create_invoice({"customerId": dataset.lee.id, "amount": "0.001", "status": "paid"})

        assert state.errors == {"amount": ["Please enter an amount greater than $0."]}
        assert repositories.invoices.count_all() == 4

    def test_update_invoice(self, actions, repositories, dataset):
        target = dataset.invoices["evil_new"]

        state = actions.update_invoice(
            target.id, {"customerId": dataset.evil.id, "amount": "7.00", "status": "paid"}
        )

        assert state.ok
        assert repositories.invoices.get_by_id(target.id).amount == Decimal("7")

    def test_update_with_bad_amount(self, actions, dataset):
        state = actions.update_invoice(
            dataset.invoices["evil_new"].id, {"customerId": dataset.evil.id, "amount": "-1", "status": "paid"}
        )

        assert state.message == "Missing fields. Failed to update invoice."
        assert state.errors == {"amount": ["Please enter an amount greater than $0."]}

    def test_delete_invoice(self, actions, repositories, dataset):
        assert actions.delete_invoice(dataset.invoices["evil_new"].id).message == "Deleted invoice."
        assert actions.delete_invoice("missing").message == "Database error: failed to delete invoice."
        assert repositories.invoices.count_all() == 3


class TestCustomerActions:

    def test_create_customer(self, actions, repositories):
        state = actions.create_customer({
            "name": "Balazs Orban",
            "email": "balazs@orban.com",
            "imageUrl": "/customers/balazs-orban.png",
        })

        assert state.ok
        assert repositories.customers.get_by_id(state.record_id).name == "Balazs Orban"

    def test_duplicate_email_is_not_reported_as_success(self, actions, repositories, dataset):
        state = actions.create_customer({
            "name": "Evil Twin",
            "email": "evil@rabbit.com",
            "imageUrl": "/customers/evil-twin.png",
        })

        assert not state.ok
        assert state.message == "Database error: failed to create customer."
        assert repositories.customers.count_filtered(SearchFilter.build("")) == 3

    def test_update_customer_validation(self, actions, dataset):
        state = actions.update_customer(dataset.lee.id, {"name": "Lee", "email": "lee", "imageUrl": "/x.png"})

        assert state.message == "Missing fields. Failed to update customer."
        assert list(state.errors) == ["email"]

    def test_delete_customer_with_invoices_is_refused(self, actions, repositories, dataset):
        state = actions.delete_customer(dataset.evil.id)

        assert not state.ok
        assert state.message == "Database error: failed to delete customer."
        assert repositories.customers.get_by_id(dataset.evil.id) == dataset.evil

    def test_delete_customer(self, actions, dataset):
        state = actions.delete_customer(dataset.lee.id)

        assert state.ok
        assert state.message == "Deleted customer."


class TestAuthenticate:

    def test_sign_in(self, actions, user):
        state = actions.authenticate(user)

        assert state.ok
        assert state.record_id == "410544b2-4001-4271-9855-fec4b6a6442a"

    def test_bad_password(self, actions, user):
        state = actions.authenticate({"email": user["email"], "password": "wrong-password"})

        assert not state.ok
        assert state.message == "Invalid credentials."
