from clinic.models import ObstetricAssessment
from exports.datasets.base import KeysetDataset, full_name
from exports.filters import OpenRangeFilterSerializer


class ObstetricsDataset(KeysetDataset):
    name = 'obstetrics'
    model = ObstetricAssessment
    sort_field = 'visit_date'
    filter_serializer = OpenRangeFilterSerializer
    landscape = True
    default_columns = (
        'visit_date', 'patient_number', 'patient_name', 'gravida', 'parity', 'gestational_age_weeks',
        'edd', 'fundal_height_cm', 'fetal_heart_rate', 'presentation', 'notes', 'recorded_by',
    )
    projection = {
        'visit_date': 'visit_date',
        'patient_number': 'patient__patient_number',
        'patient_name': full_name('patient__'),
        'gravida': 'gravida',
        'parity': 'parity',
        'gestational_age_weeks': 'gestational_age_weeks',
        'edd': 'edd',
        'fundal_height_cm': 'fundal_height_cm',
        'fetal_heart_rate': 'fetal_heart_rate',
        'presentation': 'presentation',
        'notes': 'notes',
        'recorded_by': 'recorded_by__name',
    }
