import bleach
from rest_framework import serializers


class CleanCharField(serializers.CharField):
    """CharField that strips any markup from the submitted text."""

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        return bleach.clean(value, tags=[], strip=True).strip()


class TagsField(serializers.Field):
    """Accept tags as a list or a comma separated string; always store a list."""

    def to_internal_value(self, data):
        if data in (None, ''):
            return []
        if isinstance(data, str):
            items = data.split(',')
        elif isinstance(data, (list, tuple)):
            items = data
        else:
            raise serializers.ValidationError('Tags must be a list or a comma separated string')
        return [bleach.clean(str(t), tags=[], strip=True).strip() for t in items if str(t).strip()]

    def to_representation(self, value):
        return value or []
