from .models import ZodiacPosition

SIGN_NAMES = ["Aries","Taurus","Gemini","Cancer","Leo","Virgo","Libra","Scorpio","Sagittarius","Capricorn","Aquarius","Pisces"]
SIGN_SYMBOLS = ["♈","♉","♊","♋","♌","♍","♎","♏","♐","♑","♒","♓"]

BODY_SYMBOLS = {
    "sun": "☉",
    "moon": "☽",
    "mercury": "☿",
    "venus": "♀",
    "mars": "♂",
    "jupiter": "♃",
    "saturn": "♄",
    "uranus": "♅",
    "neptune": "♆",
    "pluto": "♇",
    "meanNode": "☊",
    "trueNode": "☊",
    "lilith": "⚸",
    "chiron": "⚷",
    "ascendant": "Asc",
    "midheaven": "MC",
}


def normalize_lon(lon: float) -> float:
    # Python's % already returns a non-negative result for a positive modulus;
    # the second step folds 360.0 produced by tiny negative inputs back to 0.
    lon = lon % 360.0
    return 0.0 if lon >= 360.0 else lon

def sign_index_from_lon(lon: float) -> int:
    return int(normalize_lon(lon) // 30) % 12

def sign_name_from_lon(lon: float) -> str:
    return SIGN_NAMES[sign_index_from_lon(lon)]

def classify(lon: float) -> ZodiacPosition:
    """Map an ecliptic longitude to its sign and degree within the sign."""
    lon = normalize_lon(lon)
    idx = sign_index_from_lon(lon)
    within = lon % 30.0
    if within >= 30.0:
        within = 0.0
    return ZodiacPosition(sign=SIGN_NAMES[idx], sign_index=idx, degree_in_sign=within)

def fmt_sign_degree(lon: float) -> str:
    # "Libra 15.23°", the flattened storage format; rounded before classifying
    # so 29.996 reads as the next sign at 0.00
    z = classify(round(normalize_lon(lon), 2))
    return f"{z.sign} {z.degree_in_sign:.2f}°"

def fmt_deg(lon: float) -> str:
    # 0..360 to "sign 12°34′"
    z = classify(lon)
    deg = int(z.degree_in_sign)
    minutes_float = (z.degree_in_sign - deg) * 60
    mins = int(minutes_float)
    secs = int((minutes_float - mins) * 60)
    return f"{z.sign} {deg:02d}°{mins:02d}′{secs:02d}″"
