import pytest

from invoice_dashboard.core.errors import NotFoundError
from invoice_dashboard.services.dashboard import DashboardCards, DashboardService


@pytest.fixture
def dashboard(repositories, settings):
    return DashboardService(repositories, settings.model_copy(update={"items_per_page": 2}))


class TestOverview:

    def test_card_data(self, dashboard, dataset):
        assert dashboard.card_data() == DashboardCards(
            invoice_count=4,
            customer_count=3,
            total_paid="$5.00",
            total_pending="$368.09",
        )

    def test_latest_invoices_respect_configured_limit(self, dashboard, dataset):
        latest = dashboard.latest_invoices()

        assert len(latest) == 4
        assert latest[0].amount == "$5.00"

    def test_revenue(self, dashboard, revenue):
        samples = dashboard.revenue()

        assert sorted((s.month, s.revenue) for s in samples) == sorted(revenue)


class TestInvoicePages:

    def test_query_and_page_number(self, dashboard, dataset):
        """
        GIVEN: Three pending invoices and a page size of 2
        WHEN: Listing "pend" page by page
        THEN: Two rows, then one row, then nothing; two pages in total
        """
        assert len(dashboard.filtered_invoices("pend", 1)) == 2
        assert len(dashboard.filtered_invoices("pend", 2)) == 1
        assert dashboard.filtered_invoices("pend", 3) == []
        assert dashboard.invoice_pages("pend") == 2

    def test_blank_query_lists_everything(self, dashboard, dataset):
        assert dashboard.invoice_pages(None) == 2
        assert dashboard.invoice_pages("   ") == 2

    def test_page_numbers_start_at_one(self, dashboard, dataset):
        with pytest.raises(ValueError):
            dashboard.filtered_invoices("", 0)

    def test_invoice_by_id(self, dashboard, dataset):
        invoice = dataset.invoices["evil_old"]

        assert dashboard.invoice_by_id(invoice.id).customer_id == dataset.evil.id
        with pytest.raises(NotFoundError):
            dashboard.invoice_by_id("missing")


class TestCustomerPages:

    def test_customer_table(self, dashboard, dataset):
        first = dashboard.filtered_customers("", 1)
        second = dashboard.filtered_customers("", 2)

        assert [c.name for c in first + second] == ["Delba de Oliveira", "Evil Rabbit", "Lee Robinson"]
        assert second[0].total_invoices == 0
        assert dashboard.customer_pages("") == 2
        assert dashboard.customer_pages("rabbit") == 1

    def test_customer_options(self, dashboard, dataset):
        assert [c.id for c in dashboard.customers()] == [dataset.delba.id, dataset.evil.id, dataset.lee.id]
        assert dashboard.customer_by_id(dataset.lee.id).email == "lee@robinson.com"
