import pytest

from clinic.models import Payment
from exports.cursor import Cursor, decode_cursor, encode_cursor
from exports.errors import ValidationError
from exports.tests.utils import at

KEY_FIELD = Payment._meta.get_field('created_at')


def _token(key=None, pk=42, dataset='payments', fingerprint='abc123'):
    return encode_cursor(Cursor(dataset=dataset, fingerprint=fingerprint, key=key or at(10, 14, 5, 7, 123456), pk=pk))


def test_token_round_trips_with_microseconds():
    cursor = decode_cursor(_token(), dataset='payments', fingerprint='abc123', key_field=KEY_FIELD)
    assert cursor.key == at(10, 14, 5, 7, 123456)
    assert cursor.pk == 42


def test_tampered_token_is_rejected():
    token = _token()
    forged = token[:-2] + ('AA' if not token.endswith('AA') else 'BB')
    with pytest.raises(ValidationError) as e:
        decode_cursor(forged, dataset='payments', fingerprint='abc123', key_field=KEY_FIELD)
    assert e.value.field == 'cursor'


def test_token_is_bound_to_its_dataset():
    with pytest.raises(ValidationError) as e:
        decode_cursor(_token(), dataset='billing', fingerprint='abc123', key_field=KEY_FIELD)
    assert 'different dataset' in e.value.message


def test_token_is_bound_to_its_filters():
    with pytest.raises(ValidationError) as e:
        decode_cursor(_token(), dataset='payments', fingerprint='other', key_field=KEY_FIELD)
    assert 'different filters' in e.value.message


@pytest.mark.parametrize('token', ['', None, 'not-a-token'])
def test_garbage_is_rejected(token):
    with pytest.raises(ValidationError):
        decode_cursor(token, dataset='payments', fingerprint='abc123')


def test_unparseable_key_is_rejected():
    token = encode_cursor(Cursor(dataset='payments', fingerprint='abc123', key='31st of never', pk=1))
    with pytest.raises(ValidationError) as e:
        decode_cursor(token, dataset='payments', fingerprint='abc123', key_field=KEY_FIELD)
    assert e.value.field == 'cursor'
