from django.db.models import CharField, Value
from django.db.models.fields.json import KT
from django.db.models.functions import Coalesce

from clinic.models import DentalRecord
from exports.datasets.base import KeysetDataset, full_name
from exports.filters import OpenRangeFilterSerializer


class DentalDataset(KeysetDataset):
    name = 'dental'
    model = DentalRecord
    sort_field = 'visit_date'
    filter_serializer = OpenRangeFilterSerializer
    default_columns = (
        'visit_date',
        'patient_number',
        'patient_name',
        'diagnosis',
        'procedure_performed',
        'tooth_notes',
        'notes',
        'dentist_name',
    )
    projection = {
        'visit_date': 'visit_date',
        'patient_number': 'patient__patient_number',
        'patient_name': full_name('patient__'),
        'diagnosis': 'diagnosis',
        'procedure_performed': 'procedure_performed',
        'tooth_notes': Coalesce(KT('tooth_chart__notes'), Value(''), output_field=CharField()),
        'notes': 'notes',
        'dentist_name': 'dentist__name',
    }
