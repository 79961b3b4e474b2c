from rest_framework import serializers

from .services.vehicles import VehicleType


class VehicleTypeField(serializers.CharField):
    """Lenient vehicle type: unknown values price as CAR rather than failing."""

    def to_internal_value(self, data):
        return VehicleType.parse(super().to_internal_value(data))


class PickupSerializerMixin(serializers.Serializer):
    pickup_lat = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    pickup_lng = serializers.FloatField(required=False, allow_null=True, min_value=-180, max_value=180)
    pickup_address = serializers.CharField(max_length=512, required=False, allow_blank=True)

    def _check_pickup(self, data):
        has_coords = data.get('pickup_lat') is not None and data.get('pickup_lng') is not None
        if not has_coords and not (data.get('pickup_address') or '').strip():
            raise serializers.ValidationError("Either 'pickup_address' or pickup coordinates (pickup_lat, pickup_lng) are required")
        return data


class FareEstimateSerializer(PickupSerializerMixin):
    dropoff_lat = serializers.FloatField(min_value=-90, max_value=90)
    dropoff_lng = serializers.FloatField(min_value=-180, max_value=180)
    dropoff_address = serializers.CharField(max_length=512, required=False, allow_blank=True)

    currency = serializers.CharField(max_length=8, required=False, allow_blank=True)
    at = serializers.DateTimeField(required=False, allow_null=True)
    vehicle_type = VehicleTypeField(required=False, default=VehicleType.CAR.value)

    def validate(self, data):
        return self._check_pickup(data)


class StrictBooleanField(serializers.BooleanField):
    """Only JSON true/false; "true", 1 and friends are rejected."""

    def to_internal_value(self, data):
        if not isinstance(data, bool):
            self.fail('invalid', input=data)
        return data


class DiscountRuleSerializer(serializers.Serializer):
    minDays = serializers.IntegerField(min_value=0)
    discountPercent = serializers.FloatField(min_value=0, max_value=100)
    # a rule only applies when explicitly enabled
    enabled = StrictBooleanField(default=False)


class PropertyServicesSerializer(serializers.Serializer):
    commissionPercent = serializers.FloatField(required=False, allow_null=True)
    discountRules = DiscountRuleSerializer(many=True, required=False)


class PropertySerializer(serializers.Serializer):
    base_price = serializers.FloatField(required=False, allow_null=True)
    currency = serializers.CharField(max_length=8, required=False, allow_blank=True)
    latitude = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    longitude = serializers.FloatField(required=False, allow_null=True, min_value=-180, max_value=180)
    address = serializers.CharField(max_length=512, required=False, allow_blank=True)
    services = PropertyServicesSerializer(required=False)


class BookingPriceSerializer(serializers.Serializer):
    nightly_price = serializers.FloatField()
    nights = serializers.IntegerField(min_value=0)
    property = PropertySerializer(required=False)
    system_commission = serializers.FloatField(required=False, allow_null=True, min_value=0, max_value=100)


class CheckoutQuoteSerializer(PickupSerializerMixin):
    property = PropertySerializer()
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    include_transport = serializers.BooleanField(default=False)
    vehicle_type = VehicleTypeField(required=False, default=VehicleType.CAR.value)
    at = serializers.DateTimeField(required=False, allow_null=True)
    system_commission = serializers.FloatField(required=False, allow_null=True, min_value=0, max_value=100)

    def validate(self, data):
        if data['check_out'] < data['check_in']:
            raise serializers.ValidationError("check_out cannot be before check_in")
        if data.get('include_transport'):
            prop = data.get('property') or {}
            if prop.get('latitude') is None or prop.get('longitude') is None:
                raise serializers.ValidationError("Property location is required for transport calculation")
            self._check_pickup(data)
        return data
