from rest_framework import serializers

from exports.redaction import PROFILES
from exports.writers import FORMAT_CHOICES


class ExportRequestSerializer(serializers.Serializer):
    # Unknown dataset names are a 404, so this is not a choice field
    dataset = serializers.CharField(max_length=64)
    format = serializers.ChoiceField(choices=FORMAT_CHOICES, required=False, default='csv')
    filters = serializers.DictField(required=False, default=dict)
    columns = serializers.ListField(child=serializers.CharField(max_length=64), required=False, allow_empty=True)
    pageSize = serializers.IntegerField(required=False, min_value=1)
    header = serializers.BooleanField(required=False, default=True)
    redactionProfile = serializers.ChoiceField(choices=PROFILES, required=False, default='default')


class PageRequestSerializer(serializers.Serializer):
    dataset = serializers.CharField(max_length=64)
    filters = serializers.DictField(required=False, default=dict)
    cursor = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    pageSize = serializers.IntegerField(required=False, min_value=1)


class ConsentSerializer(serializers.Serializer):
    rationale = serializers.CharField(min_length=10)
    scope = serializers.CharField(min_length=3)
