import pytest

from exports.datasets.payments import PaymentsDataset
from exports.errors import NotFoundError
from exports.registry import DatasetRegistry, registry

EXPECTED = {
    'appointments', 'labs', 'billing', 'patients', 'radiology', 'pharmacy', 'bed_assignments', 'payments',
    'reception_register', 'reception_register_detailed', 'queue_events', 'reception_daily', 'obstetrics', 'dental',
}


def test_registry_holds_every_dataset():
    assert set(registry.names()) == EXPECTED
    assert len(registry) == len(EXPECTED)


def test_lookup_is_exact():
    assert registry.get('payments').name == 'payments'
    for name in ('Payments', ' payments', 'payment', '', None, 42):
        with pytest.raises(NotFoundError):
            registry.get(name)


def test_not_found_maps_to_404():
    with pytest.raises(NotFoundError) as e:
        registry.get('ledger')
    assert e.value.status_code == 404
    assert e.value.as_dict()['kind'] == 'not_found'


def test_columns_are_distinct_and_non_empty():
    for dataset in registry:
        assert dataset.default_columns
        assert len(set(dataset.default_columns)) == len(dataset.default_columns), dataset.name


def test_describe_tells_reports_from_records():
    described = {d['name']: d for d in registry.describe()}
    assert described['payments']['kind'] == 'records'
    assert described['reception_daily']['kind'] == 'report'
    assert described['payments']['columns'][0] == 'receipt_no'


def test_duplicate_names_are_refused():
    with pytest.raises(ValueError):
        DatasetRegistry([PaymentsDataset(), PaymentsDataset()])
