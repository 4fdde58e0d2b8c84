from clinic.models import Patient
from exports.datasets.base import KeysetDataset
from exports.filters import OpenRangeFilterSerializer

DEMOGRAPHIC_COLUMNS = (
    'patient_number', 'first_name', 'last_name', 'date_of_birth', 'age_years', 'gender', 'phone',
    'address', 'nin', 'district', 'subcounty', 'parish', 'village', 'occupation', 'blood_group',
    'next_of_kin_first_name', 'next_of_kin_last_name', 'next_of_kin_country', 'next_of_kin_phone',
    'next_of_kin_relation', 'next_of_kin_residence',
    'insurance_provider', 'insurance_member_no',
)


class PatientsDataset(KeysetDataset):
    """Demographics only; registration range is optional."""
    name = 'patients'
    model = Patient
    sort_field = 'created_at'
    filter_serializer = OpenRangeFilterSerializer
    landscape = True
    default_columns = DEMOGRAPHIC_COLUMNS
    projection = {column: column for column in DEMOGRAPHIC_COLUMNS}
