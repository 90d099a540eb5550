from rest_framework import serializers


class CompanySettingsSerializer(serializers.Serializer):
    """
    Issuer identity printed on slips.

    Both fields are required on input; empty strings are accepted.
    """

    companyName = serializers.CharField(source='company_name', max_length=200, allow_blank=True)
    address = serializers.CharField(allow_blank=True)
