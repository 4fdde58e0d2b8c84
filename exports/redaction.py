"""
Redaction profiles applied to export records before they are written.

Redacted columns keep their place in the record with an empty value so
every row still matches the column list.
"""
from exports.errors import ValidationError

PROFILES = ('default', 'billing', 'clinical', 'minimal')

DATE_OF_BIRTH_COLUMNS = ('dob', 'date_of_birth')


def redact_row(row: dict, profile: str) -> dict:
    if profile not in PROFILES:
        raise ValidationError('redactionProfile', f'Unknown redaction profile "{profile}".')
    clone = dict(row)
    if profile == 'default':
        for column in DATE_OF_BIRTH_COLUMNS:
            if clone.get(column):
                clone[column] = str(clone[column])[:4]
        for column in ('address', 'notes'):
            if column in clone:
                clone[column] = None
    elif profile == 'billing':
        if 'notes' in clone:
            clone['notes'] = None
    return clone
