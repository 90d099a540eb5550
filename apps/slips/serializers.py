from decimal import Decimal

from rest_framework import serializers

from .domain import MATERIAL_MAX_LENGTH, VEHICLE_NUMBER_MAX_LENGTH, SlipStatus


# =============================================================================
# Input Serializers
# =============================================================================

class SlipCreateInputSerializer(serializers.Serializer):
    """
    Validate input for opening a slip.

    Fields:
        vehicleNumber (str): Vehicle registration, upper-cased by the store
        material (str): Material carried
        grossWeight (decimal): Loaded weight in tons
    """

    vehicleNumber = serializers.CharField(max_length=VEHICLE_NUMBER_MAX_LENGTH)
    material = serializers.CharField(max_length=MATERIAL_MAX_LENGTH)
    grossWeight = serializers.DecimalField(
        max_digits=10,
        decimal_places=3,
        min_value=Decimal('0.001'),
    )


class SlipCompleteInputSerializer(serializers.Serializer):
    """
    Validate input for completing a slip.

    Fields:
        tareWeight (decimal): Empty weight in tons
    """

    tareWeight = serializers.DecimalField(
        max_digits=10,
        decimal_places=3,
        min_value=Decimal('0.001'),
    )


class SlipFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for slip listing.

    Query Parameters:
        status (str): Pending or Complete
    """

    status = serializers.ChoiceField(choices=SlipStatus.choices, required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class SlipSerializer(serializers.Serializer):
    """
    Read-only view of a domain slip.

    Tare, tare time and net weight do not exist on a PendingSlip, so those
    keys are left out of the output rather than rendered as null.
    """

    id = serializers.UUIDField(read_only=True)
    slipNumber = serializers.CharField(source='slip_number', read_only=True)
    status = serializers.CharField(read_only=True)
    vehicleNumber = serializers.CharField(source='vehicle_number', read_only=True)
    material = serializers.CharField(read_only=True)
    grossWeight = serializers.DecimalField(source='gross_weight', max_digits=10, decimal_places=3, read_only=True)
    grossWeightTime = serializers.DateTimeField(source='gross_weight_time', read_only=True)
    tareWeight = serializers.DecimalField(source='tare_weight', max_digits=10, decimal_places=3, read_only=True)
    tareWeightTime = serializers.DateTimeField(source='tare_weight_time', read_only=True)
    netWeight = serializers.DecimalField(source='net_weight', max_digits=10, decimal_places=3, read_only=True)


class SlipSummarySerializer(serializers.Serializer):
    pending = serializers.IntegerField()
    complete = serializers.IntegerField()


class NextSlipNumberSerializer(serializers.Serializer):
    slipNumber = serializers.CharField()
