"""
Customer repository conformance. Each test runs once per backend.
"""
import pytest

from invoice_dashboard.core.errors import (
    CustomerHasInvoicesError,
    ForeignKeyViolationError,
    NotFoundError,
    UniqueConstraintError,
)
from invoice_dashboard.schemas.customer import CustomerForm
from invoice_dashboard.utils.pagination import Pager
from invoice_dashboard.utils.search import SearchFilter

AMY = CustomerForm(name="Amy Burns", email="amy@burns.com", image_url="/customers/amy-burns.png")

EVERYONE = SearchFilter.build("")


class TestCreateAndRead:

    def test_round_trip(self, repositories):
        """
        GIVEN: A valid customer payload
        WHEN: Created and read back by id
        THEN: The same values come back under a generated id
        """
        created = repositories.customers.create(AMY)

        loaded = repositories.customers.get_by_id(created.id)

        assert loaded == created
        assert (loaded.name, loaded.email, loaded.image_url) == (AMY.name, AMY.email, AMY.image_url)
        assert len(created.id) == 36

    def test_duplicate_email_is_a_unique_constraint_failure(self, repositories):
        repositories.customers.create(AMY)
        twin = CustomerForm(name="Another Amy", email=AMY.email, image_url="/customers/other.png")

        with pytest.raises(UniqueConstraintError) as exc_info:
            repositories.customers.create(twin)

        assert exc_info.value.field == "email"
        assert repositories.customers.count_filtered(EVERYONE) == 1

    def test_unknown_id(self, repositories):
        with pytest.raises(NotFoundError):
            repositories.customers.get_by_id("00000000-0000-0000-0000-000000000000")

    def test_list_all_is_sorted_by_name(self, repositories, dataset):
        names = [c.name for c in repositories.customers.list_all()]

        assert names == ["Delba de Oliveira", "Evil Rabbit", "Lee Robinson"]


class TestUpdate:

    def test_update_replaces_fields(self, repositories, dataset):
        form = CustomerForm(name="Lee R.", email="lee@robinson.com", image_url="/customers/lee-2.png")

        repositories.customers.update(dataset.lee.id, form)

        loaded = repositories.customers.get_by_id(dataset.lee.id)
        assert (loaded.name, loaded.image_url) == ("Lee R.", "/customers/lee-2.png")

    def test_update_to_taken_email(self, repositories, dataset):
        form = CustomerForm(name="Lee Robinson", email=dataset.evil.email, image_url=dataset.lee.image_url)

        with pytest.raises(UniqueConstraintError):
            repositories.customers.update(dataset.lee.id, form)

        assert repositories.customers.get_by_id(dataset.lee.id).email == "lee@robinson.com"

    def test_update_unknown_id(self, repositories):
        with pytest.raises(NotFoundError):
            repositories.customers.update("missing", AMY)


class TestDelete:

    def test_delete_customer_without_invoices(self, repositories, dataset):
        repositories.customers.delete(dataset.lee.id)

        with pytest.raises(NotFoundError):
            repositories.customers.get_by_id(dataset.lee.id)

    def test_delete_is_restricted_while_invoices_exist(self, repositories, dataset):
        """
        GIVEN: A customer that owns two invoices
        WHEN: The customer is deleted
        THEN:
            - CustomerHasInvoicesError (a referential-integrity failure)
            - The customer is still there
            - Both invoices are still there and still reference it
        """
        with pytest.raises(CustomerHasInvoicesError) as exc_info:
            repositories.customers.delete(dataset.evil.id)

        assert isinstance(exc_info.value, ForeignKeyViolationError)
        assert exc_info.value.invoice_count == 2
        assert repositories.customers.get_by_id(dataset.evil.id) == dataset.evil
        for key in ("evil_old", "evil_new"):
            invoice = repositories.invoices.get_by_id(dataset.invoices[key].id)
            assert invoice.customer_id == dataset.evil.id
        assert repositories.invoices.count_all() == 4

    def test_delete_unknown_id(self, repositories):
        with pytest.raises(NotFoundError):
            repositories.customers.delete("missing")


class TestFilteredWithTotals:

    def test_totals_per_customer(self, repositories, dataset):
        rows = repositories.customers.list_filtered_with_totals(EVERYONE)

        totals = [(r.name, r.total_invoices, r.total_pending, r.total_paid) for r in rows]
        assert totals == [
            ("Delba de Oliveira", 2, 20348, 500),
            ("Evil Rabbit", 2, 16461, 0),
            ("Lee Robinson", 0, 0, 0),
        ]

    def test_customer_without_invoices_is_zero_filled(self, repositories, dataset):
        rows = repositories.customers.list_filtered_with_totals(SearchFilter.build("robinson"))

        assert len(rows) == 1
        lee = rows[0]
        assert lee.id == dataset.lee.id
        assert (lee.total_invoices, lee.total_pending, lee.total_paid) == (0, 0, 0)
        assert lee.total_paid_display == "$0.00"

    def test_filters_on_name_and_email_only(self, repositories, dataset):
        by_email = repositories.customers.list_filtered_with_totals(SearchFilter.build("OLIVEIRA.COM"))
        by_status = repositories.customers.list_filtered_with_totals(SearchFilter.build("pending"))

        assert [r.id for r in by_email] == [dataset.delba.id]
        assert by_status == []

    def test_pages(self, repositories, dataset):
        pager = Pager(2)

        first = repositories.customers.list_filtered_with_totals(EVERYONE, pager.window(1))
        second = repositories.customers.list_filtered_with_totals(EVERYONE, pager.window(2))

        assert [r.name for r in first] == ["Delba de Oliveira", "Evil Rabbit"]
        assert [r.name for r in second] == ["Lee Robinson"]
        assert repositories.customers.total_pages(EVERYONE, pager) == 2

    def test_count_filtered(self, repositories, dataset):
        assert repositories.customers.count_filtered(EVERYONE) == 3
        assert repositories.customers.count_filtered(SearchFilter.build("rabbit")) == 1
        assert repositories.customers.count_filtered(SearchFilter.build("nobody")) == 0
