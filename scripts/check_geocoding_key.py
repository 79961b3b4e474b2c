import os
os.environ['DJANGO_SETTINGS_MODULE'] = 'booking_project.settings'
os.environ['MAPBOX_ACCESS_TOKEN'] = 'server-token'
import django
django.setup()
from quotes.services.geocoding import GeocodingService
import requests

called = {}

def fake_get(url, params=None, timeout=None):
    called['url'] = url
    called['params'] = params
    # Minimal fake Mapbox response structure
    return type('R', (), {'raise_for_status': lambda self: None, 'json': lambda self: {"features": [{"place_name": "Kariakoo, Dar es Salaam", "geometry": {"coordinates": [39.2747, -6.8178]}}]}})()

orig_get = requests.get
requests.get = fake_get

try:
    place = GeocodingService.forward('Kariakoo', use_cache=False)
    print('place=', place)
    print('url=', called.get('url'))
    print('sent_token=', called.get('params', {}).get('access_token'))
finally:
    requests.get = orig_get
