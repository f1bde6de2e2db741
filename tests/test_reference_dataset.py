from crm_dedupe.datasets import ReferenceDatasetGenerator
from crm_dedupe.service import CustomerDedupService
from crm_dedupe.stores import InMemoryCustomerStore


def test_generator_is_deterministic_per_seed() -> None:
    first = ReferenceDatasetGenerator(seed=11).generate(size=30, duplicate_rate=0.2)
    second = ReferenceDatasetGenerator(seed=11).generate(size=30, duplicate_rate=0.2)

    assert first == second


def test_generated_aggregates_match_bookings() -> None:
    customers, bookings = ReferenceDatasetGenerator(seed=5).generate(size=50, organization_id="org")

    assert len(customers) == 50
    assert len({c.customer_id for c in customers}) == 50
    for customer in customers:
        owned = [b.total_amount for b in bookings if b.customer_id == customer.customer_id]
        assert customer.total_bookings == len(owned)
        assert customer.total_spent == round(sum(owned), 2)
        assert customer.organization_id == "org"


def test_generated_duplicates_are_found() -> None:
    customers, bookings = ReferenceDatasetGenerator(seed=9).generate(size=100, duplicate_rate=0.3)
    service = CustomerDedupService(InMemoryCustomerStore(customers, bookings))

    assert service.get_stats().duplicate_groups > 0


def test_empty_dataset() -> None:
    assert ReferenceDatasetGenerator().generate(size=0) == ([], [])
