"""Fixed place table used by the location resolver.

Keys are lower-case city names. Insertion order is the tie-break for
substring matches, so keep the larger cities first within each region.
"""

from __future__ import annotations

from typing import Dict, NamedTuple, Optional


class Place(NamedTuple):
    latitude: float
    longitude: float
    formatted_name: str
    country_name: str
    zone_name: Optional[str]


PLACES: Dict[str, Place] = {
    # North America
    "new york": Place(40.7128, -74.0060, "New York, NY, USA", "United States", "America/New_York"),
    "los angeles": Place(34.0522, -118.2437, "Los Angeles, CA, USA", "United States", "America/Los_Angeles"),
    "chicago": Place(41.8781, -87.6298, "Chicago, IL, USA", "United States", "America/Chicago"),
    "miami": Place(25.7617, -80.1918, "Miami, FL, USA", "United States", "America/New_York"),
    "houston": Place(29.7604, -95.3698, "Houston, TX, USA", "United States", "America/Chicago"),
    "phoenix": Place(33.4484, -112.0740, "Phoenix, AZ, USA", "United States", "America/Phoenix"),
    "philadelphia": Place(39.9526, -75.1652, "Philadelphia, PA, USA", "United States", "America/New_York"),
    "san francisco": Place(37.7749, -122.4194, "San Francisco, CA, USA", "United States", "America/Los_Angeles"),
    "seattle": Place(47.6062, -122.3321, "Seattle, WA, USA", "United States", "America/Los_Angeles"),
    "denver": Place(39.7392, -104.9903, "Denver, CO, USA", "United States", "America/Denver"),
    "boston": Place(42.3601, -71.0589, "Boston, MA, USA", "United States", "America/New_York"),
    "atlanta": Place(33.7490, -84.3880, "Atlanta, GA, USA", "United States", "America/New_York"),
    "honolulu": Place(21.3069, -157.8583, "Honolulu, HI, USA", "United States", "Pacific/Honolulu"),
    "anchorage": Place(61.2181, -149.9003, "Anchorage, AK, USA", "United States", "America/Anchorage"),
    "toronto": Place(43.6532, -79.3832, "Toronto, ON, Canada", "Canada", "America/Toronto"),
    "vancouver": Place(49.2827, -123.1207, "Vancouver, BC, Canada", "Canada", "America/Vancouver"),
    "montreal": Place(45.5017, -73.5673, "Montreal, QC, Canada", "Canada", "America/Toronto"),
    "mexico city": Place(19.4326, -99.1332, "Mexico City, Mexico", "Mexico", "America/Mexico_City"),
    # South America
    "sao paulo": Place(-23.5505, -46.6333, "Sao Paulo, Brazil", "Brazil", "America/Sao_Paulo"),
    "rio de janeiro": Place(-22.9068, -43.1729, "Rio de Janeiro, Brazil", "Brazil", "America/Sao_Paulo"),
    "buenos aires": Place(-34.6037, -58.3816, "Buenos Aires, Argentina", "Argentina", "America/Argentina/Buenos_Aires"),
    "lima": Place(-12.0464, -77.0428, "Lima, Peru", "Peru", "America/Lima"),
    "bogota": Place(4.7110, -74.0721, "Bogota, Colombia", "Colombia", "America/Bogota"),
    # Europe
    "london": Place(51.5074, -0.1278, "London, UK", "United Kingdom", "Europe/London"),
    "paris": Place(48.8566, 2.3522, "Paris, France", "France", "Europe/Paris"),
    "berlin": Place(52.5200, 13.4050, "Berlin, Germany", "Germany", "Europe/Berlin"),
    "rome": Place(41.9028, 12.4964, "Rome, Italy", "Italy", "Europe/Rome"),
    "madrid": Place(40.4168, -3.7038, "Madrid, Spain", "Spain", "Europe/Madrid"),
    "amsterdam": Place(52.3676, 4.9041, "Amsterdam, Netherlands", "Netherlands", "Europe/Amsterdam"),
    "dublin": Place(53.3498, -6.2603, "Dublin, Ireland", "Ireland", "Europe/Dublin"),
    "lisbon": Place(38.7223, -9.1393, "Lisbon, Portugal", "Portugal", "Europe/Lisbon"),
    "vienna": Place(48.2082, 16.3738, "Vienna, Austria", "Austria", "Europe/Vienna"),
    "stockholm": Place(59.3293, 18.0686, "Stockholm, Sweden", "Sweden", "Europe/Stockholm"),
    "athens": Place(37.9838, 23.7275, "Athens, Greece", "Greece", "Europe/Athens"),
    "moscow": Place(55.7558, 37.6173, "Moscow, Russia", "Russia", "Europe/Moscow"),
    "istanbul": Place(41.0082, 28.9784, "Istanbul, Turkey", "Turkey", "Europe/Istanbul"),
    # Africa and Middle East
    "cairo": Place(30.0444, 31.2357, "Cairo, Egypt", "Egypt", "Africa/Cairo"),
    "lagos": Place(6.5244, 3.3792, "Lagos, Nigeria", "Nigeria", "Africa/Lagos"),
    "nairobi": Place(-1.2921, 36.8219, "Nairobi, Kenya", "Kenya", "Africa/Nairobi"),
    "johannesburg": Place(-26.2041, 28.0473, "Johannesburg, South Africa", "South Africa", "Africa/Johannesburg"),
    "dubai": Place(25.2048, 55.2708, "Dubai, United Arab Emirates", "United Arab Emirates", "Asia/Dubai"),
    "tehran": Place(35.6892, 51.3890, "Tehran, Iran", "Iran", "Asia/Tehran"),
    # Asia
    "tokyo": Place(35.6762, 139.6503, "Tokyo, Japan", "Japan", "Asia/Tokyo"),
    "beijing": Place(39.9042, 116.4074, "Beijing, China", "China", "Asia/Shanghai"),
    "shanghai": Place(31.2304, 121.4737, "Shanghai, China", "China", "Asia/Shanghai"),
    "hong kong": Place(22.3193, 114.1694, "Hong Kong", "Hong Kong", "Asia/Hong_Kong"),
    "seoul": Place(37.5665, 126.9780, "Seoul, South Korea", "South Korea", "Asia/Seoul"),
    "singapore": Place(1.3521, 103.8198, "Singapore", "Singapore", "Asia/Singapore"),
    "bangkok": Place(13.7563, 100.5018, "Bangkok, Thailand", "Thailand", "Asia/Bangkok"),
    "delhi": Place(28.7041, 77.1025, "Delhi, India", "India", "Asia/Kolkata"),
    "mumbai": Place(19.0760, 72.8777, "Mumbai, India", "India", "Asia/Kolkata"),
    "kathmandu": Place(27.7172, 85.3240, "Kathmandu, Nepal", "Nepal", "Asia/Kathmandu"),
    # Australia and Oceania
    "sydney": Place(-33.8688, 151.2093, "Sydney, Australia", "Australia", "Australia/Sydney"),
    "melbourne": Place(-37.8136, 144.9631, "Melbourne, Australia", "Australia", "Australia/Melbourne"),
    "perth": Place(-31.9505, 115.8605, "Perth, Australia", "Australia", "Australia/Perth"),
    "auckland": Place(-36.8509, 174.7645, "Auckland, New Zealand", "New Zealand", "Pacific/Auckland"),
}
