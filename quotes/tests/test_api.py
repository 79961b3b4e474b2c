import pytest
from rest_framework.test import APIClient
from django.urls import reverse

from quotes.services.geocoding import GeocodeResult

AIRPORT = {"pickup_lat": -6.8781, "pickup_lng": 39.2026}
PROPERTY_POINT = {"dropoff_lat": -6.7924, "dropoff_lng": 39.2083}


@pytest.mark.django_db
def test_fare_estimate_by_coords():
    client = APIClient()
    payload = dict(AIRPORT, **PROPERTY_POINT, at="2026-10-21T14:00:00+03:00", vehicle_type="CAR")
    resp = client.post(reverse('quotes:fare_estimate'), payload, format='json')
    assert resp.status_code == 200
    data = resp.json()
    assert data['surge_multiplier'] == 1.0
    assert data['currency'] == 'TZS'
    assert data['total'] == data['base_fare'] + data['distance_fare'] + data['time_fare']
    assert data['formatted'].endswith(' TZS')
    assert data['breakdown'].startswith('Base fare:')


@pytest.mark.django_db
def test_fare_estimate_rush_hour_costs_more():
    client = APIClient()
    url = reverse('quotes:fare_estimate')
    off_peak = client.post(url, dict(AIRPORT, **PROPERTY_POINT, at="2026-10-21T14:00:00+03:00"), format='json').json()
    rush = client.post(url, dict(AIRPORT, **PROPERTY_POINT, at="2026-10-21T08:00:00+03:00"), format='json').json()
    assert rush['surge_multiplier'] == 1.2
    assert rush['total'] > off_peak['total']


@pytest.mark.django_db
def test_fare_estimate_unknown_vehicle_prices_as_car():
    client = APIClient()
    payload = dict(AIRPORT, **PROPERTY_POINT, at="2026-10-21T14:00:00+03:00", vehicle_type="spaceship")
    resp = client.post(reverse('quotes:fare_estimate'), payload, format='json')
    assert resp.status_code == 200
    assert resp.json()['vehicle_type'] == 'CAR'
    assert resp.json()['base_fare'] == 2000.0


@pytest.mark.django_db
def test_fare_estimate_by_address(monkeypatch):
    client = APIClient()

    monkeypatch.setattr(
        'quotes.services.geocoding.GeocodingService.forward',
        lambda query, country='TZ', use_cache=True: GeocodeResult(-6.8781, 39.2026, 'JNIA, Dar es Salaam'),
    )

    payload = dict(PROPERTY_POINT, pickup_address='JNIA', vehicle_type='BODA')
    resp = client.post(reverse('quotes:fare_estimate'), payload, format='json')
    assert resp.status_code == 200
    data = resp.json()
    assert data['pickup_address'] == 'JNIA, Dar es Salaam'
    assert data['vehicle_type'] == 'BODA'
    assert data['total'] >= 1500


@pytest.mark.django_db
def test_fare_estimate_geocoding_failure(monkeypatch):
    client = APIClient()

    def fail(query, country='TZ', use_cache=True):
        raise ValueError(f"Could not geocode address: {query}")

    monkeypatch.setattr('quotes.services.geocoding.GeocodingService.forward', fail)

    resp = client.post(reverse('quotes:fare_estimate'), dict(PROPERTY_POINT, pickup_address='Atlantis'), format='json')
    assert resp.status_code == 400
    assert 'Unable to resolve pickup location' in resp.json()['detail']


@pytest.mark.django_db
def test_fare_estimate_out_of_range_coords():
    client = APIClient()
    payload = dict(PROPERTY_POINT, pickup_lat=95.0, pickup_lng=39.2)
    resp = client.post(reverse('quotes:fare_estimate'), payload, format='json')
    assert resp.status_code == 400


@pytest.mark.django_db
def test_fare_estimate_missing_pickup():
    client = APIClient()
    resp = client.post(reverse('quotes:fare_estimate'), PROPERTY_POINT, format='json')
    assert resp.status_code == 400


@pytest.mark.django_db
def test_booking_price():
    client = APIClient()
    payload = {
        "nightly_price": 100000,
        "nights": 10,
        "system_commission": 0,
        "property": {"services": {
            "commissionPercent": 10,
            "discountRules": [{"minDays": 7, "discountPercent": 15, "enabled": True}],
        }},
    }
    resp = client.post(reverse('quotes:booking_price'), payload, format='json')
    assert resp.status_code == 200
    data = resp.json()
    assert data['commission_percent'] == 10
    assert data['price_with_commission'] == 1100000
    assert data['discount_amount'] == 165000
    assert data['final_price'] == 935000


@pytest.mark.django_db
def test_booking_price_rejects_non_boolean_rule_flag():
    client = APIClient()
    for flag in ("true", 1):
        payload = {
            "nightly_price": 1000,
            "nights": 10,
            "property": {"services": {"discountRules": [{"minDays": 3, "discountPercent": 50, "enabled": flag}]}},
        }
        resp = client.post(reverse('quotes:booking_price'), payload, format='json')
        assert resp.status_code == 400


@pytest.mark.django_db
def test_booking_price_rule_without_flag_is_ignored():
    client = APIClient()
    payload = {
        "nightly_price": 1000,
        "nights": 10,
        "system_commission": 0,
        "property": {"services": {"discountRules": [{"minDays": 3, "discountPercent": 50}]}},
    }
    resp = client.post(reverse('quotes:booking_price'), payload, format='json')
    assert resp.status_code == 200
    assert resp.json()['discount_percent'] == 0
    assert resp.json()['final_price'] == 10000


@pytest.mark.django_db
def test_booking_price_falls_back_to_system_commission(settings):
    settings.SYSTEM_COMMISSION_PERCENT = 5
    client = APIClient()
    resp = client.post(reverse('quotes:booking_price'), {"nightly_price": 200, "nights": 2}, format='json')
    assert resp.status_code == 200
    assert resp.json()['commission_percent'] == 5
    assert resp.json()['final_price'] == 420


@pytest.mark.django_db
def test_booking_price_rejects_negative_nights():
    client = APIClient()
    resp = client.post(reverse('quotes:booking_price'), {"nightly_price": 200, "nights": -3}, format='json')
    assert resp.status_code == 400


@pytest.mark.django_db
def test_checkout_quote_with_transport():
    client = APIClient()
    payload = dict(
        AIRPORT,
        property={
            "base_price": 100000,
            "currency": "TZS",
            "latitude": -6.7924,
            "longitude": 39.2083,
            "services": {
                "commissionPercent": 10,
                "discountRules": [{"minDays": 7, "discountPercent": 15, "enabled": True}],
            },
        },
        check_in="2026-11-01",
        check_out="2026-11-11",
        include_transport=True,
        vehicle_type="CAR",
        at="2026-10-21T14:00:00+03:00",
        system_commission=0,
    )
    resp = client.post(reverse('quotes:checkout_quote'), payload, format='json')
    assert resp.status_code == 200
    data = resp.json()
    assert data['nights'] == 10
    assert data['accommodation']['final_price'] == 935000
    assert data['transport']['total'] >= 2000
    assert data['total'] == 935000 + data['transport']['total']


@pytest.mark.django_db
def test_checkout_quote_transport_requires_property_location():
    client = APIClient()
    payload = dict(
        AIRPORT,
        property={"base_price": 50000},
        check_in="2026-11-01",
        check_out="2026-11-03",
        include_transport=True,
    )
    resp = client.post(reverse('quotes:checkout_quote'), payload, format='json')
    assert resp.status_code == 400


@pytest.mark.django_db
def test_vehicle_pricing_table():
    client = APIClient()
    resp = client.get(reverse('quotes:vehicle_pricing'))
    assert resp.status_code == 200
    data = resp.json()
    assert set(data) == {'BODA', 'BAJAJI', 'CAR', 'XL', 'PREMIUM'}
    assert data['CAR'] == {'base_fare': 2000.0, 'per_km_rate': 500.0, 'per_minute_rate': 50.0, 'average_speed_kmh': 30.0}
