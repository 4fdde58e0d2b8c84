"""
URL mappings for the export API.  Trailing slashes are omitted, matching
the rest of the backend (``APPEND_SLASH = False``).
"""
from django.urls import path

from .views import direct_export, export_page, list_datasets, record_consent

urlpatterns = [
    path('api/exports/datasets', list_datasets, name='exports-datasets'),
    path('api/exports/direct', direct_export, name='exports-direct'),
    path('api/exports/page', export_page, name='exports-page'),
    path('api/exports/consent', record_consent, name='exports-consent'),
]
