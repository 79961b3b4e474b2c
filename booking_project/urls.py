from django.urls import path, include

urlpatterns = [
    path('quotes/', include('quotes.urls')),
]
