from prometheus_client import Counter

EXPORTS_COMPLETED = Counter(
    'dayspring_exports_completed',
    'Exports that ran to completion',
    ['dataset'],
)
EXPORT_ROWS = Counter(
    'dayspring_export_rows',
    'Rows delivered by completed exports',
    ['dataset'],
)
EXPORT_FAILURES = Counter(
    'dayspring_export_failures',
    'Exports aborted by a source or writer error',
    ['dataset', 'kind'],
)
