from django.urls import path
from .views import BookingPriceView, CheckoutQuoteView, FareEstimateView, VehiclePricingView

app_name = 'quotes'

urlpatterns = [
    path('api/fare/', FareEstimateView.as_view(), name='fare_estimate'),
    path('api/booking-price/', BookingPriceView.as_view(), name='booking_price'),
    path('api/checkout/', CheckoutQuoteView.as_view(), name='checkout_quote'),
    path('api/vehicles/', VehiclePricingView.as_view(), name='vehicle_pricing'),
]
