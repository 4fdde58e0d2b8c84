import pytest

from exports.tests.utils import make_patient, seed_clinic_fixture


@pytest.fixture
def patient(db):
    return make_patient(1)


@pytest.fixture
def clinic(db):
    return seed_clinic_fixture()
