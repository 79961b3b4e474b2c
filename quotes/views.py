import logging
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status

from .serializers import BookingPriceSerializer, CheckoutQuoteSerializer, FareEstimateSerializer
from .services.checkout import CheckoutService
from .services.fare import FareService, fare_breakdown_text, format_fare
from .services.geo import Location
from .services.geocoding import GeocodingService
from .services.pricing import PricingService, SystemSettingsService
from .services.validation import QuoteValidationError, quote_fare

logger = logging.getLogger(__name__)


def _pickup_location(data) -> Location:
    """Pickup from explicit coordinates, otherwise geocoded from the address."""
    address = (data.get('pickup_address') or '').strip() or None
    if data.get('pickup_lat') is not None and data.get('pickup_lng') is not None:
        return Location(latitude=data['pickup_lat'], longitude=data['pickup_lng'], address=address)

    place = GeocodingService.forward(address)
    return Location(latitude=place.latitude, longitude=place.longitude, address=place.place_name)


class FareEstimateView(APIView):
    """Upfront transport fare between a pickup point and a drop-off point."""

    def post(self, request):
        serializer = FareEstimateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            origin = _pickup_location(data)
        except Exception as exc:
            logger.exception("Pickup geocoding failed in fare estimate")
            return Response({"detail": f"Unable to resolve pickup location: {exc}"}, status=status.HTTP_400_BAD_REQUEST)

        destination = Location(
            latitude=data['dropoff_lat'],
            longitude=data['dropoff_lng'],
            address=(data.get('dropoff_address') or '').strip() or None,
        )

        result = quote_fare(
            origin,
            destination,
            currency=data.get('currency') or None,
            at=data.get('at'),
            vehicle_type=data.get('vehicle_type'),
        )
        if not result.is_ok:
            return Response({"detail": str(result.error), "field": result.error.field}, status=status.HTTP_400_BAD_REQUEST)

        fare = result.value
        payload = fare.to_dict()
        payload.update({
            "pickup_address": origin.address,
            "formatted": format_fare(fare),
            "breakdown": fare_breakdown_text(fare),
        })
        return Response(payload)


class BookingPriceView(APIView):
    """Guest-facing accommodation price: commission markup and length-of-stay discount."""

    def post(self, request):
        serializer = BookingPriceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        system_commission = data.get('system_commission')
        if system_commission is None:
            system_commission = SystemSettingsService.default_commission_percent()

        breakdown = PricingService.compose_booking_price(
            nightly_price=data['nightly_price'],
            nights=data['nights'],
            prop=data.get('property'),
            system_commission=system_commission,
        )
        return Response(breakdown)


class CheckoutQuoteView(APIView):
    """Combined stay + optional transfer total shown on the booking confirmation step."""

    def post(self, request):
        serializer = CheckoutQuoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        origin = None
        if data.get('include_transport'):
            try:
                origin = _pickup_location(data)
            except Exception as exc:
                logger.exception("Pickup geocoding failed in checkout quote")
                return Response({"detail": f"Unable to resolve pickup location: {exc}"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            quote = CheckoutService().quote(
                data['property'],
                data['check_in'],
                data['check_out'],
                origin=origin,
                vehicle_type=data.get('vehicle_type'),
                at=data.get('at'),
                system_commission=data.get('system_commission'),
            )
        except QuoteValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(quote)


class VehiclePricingView(APIView):
    """Active per-vehicle rate table."""

    def get(self, request):
        table = FareService().pricing_table
        return Response({vehicle.value: cfg.to_dict() for vehicle, cfg in table.items()})
