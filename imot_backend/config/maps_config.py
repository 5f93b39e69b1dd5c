"""
Google Maps configuration for geocoding and nearby places
"""
import os

GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY")
MAPS_BASE_URL = os.getenv("MAPS_BASE_URL", "https://maps.googleapis.com/maps/api")

# Results are restricted to a single country context
MAPS_REGION = os.getenv("MAPS_REGION", "bg")
MAPS_LANGUAGE = os.getenv("MAPS_LANGUAGE", "bg")
MAPS_COUNTRY = os.getenv("MAPS_COUNTRY", "BG")

MAPS_TIMEOUT = float(os.getenv("MAPS_TIMEOUT", "10"))
GEOCODE_CACHE_SIZE = int(os.getenv("GEOCODE_CACHE_SIZE", "1024"))
NEARBY_MAX_WORKERS = int(os.getenv("NEARBY_MAX_WORKERS", "4"))
