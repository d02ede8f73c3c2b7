"""Offline seed-data generator: give every hospital a city and coordinates.

The source extract has no location data, so each hospital is assigned one of
the cities below, chosen by a stable hash of its normalized name and weighted
by city size. Coordinates are jittered around the city centre with a random
generator seeded from the same hash, so re-running on the same input always
produces the same output file.

Usage:
    python geo_enrichment.py data/healthcare_dataset.csv data/healthcare_dataset_with_coords.csv
"""

import argparse
import hashlib
import logging
import math
import random
import sys
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from loader import DataLoadError, read_records
from preprocessing import DATE_COLUMNS, UNKNOWN, normalize_name, parse_dates

logger = logging.getLogger(__name__)

URBAN_SHARE = 0.8
URBAN_OFFSET_KM = 5
RURAL_OFFSET_KM = 20
KM_PER_DEGREE = 111
HASH_BUCKETS = 1000


@dataclass(frozen=True)
class City:
    city: str
    country: str
    lat: float
    lon: float
    weight: float


# Larger cities get larger weights.
CITIES = [
    City("London", "UK", 51.5074, -0.1278, 0.06),
    City("Paris", "France", 48.8566, 2.3522, 0.06),
    City("Berlin", "Germany", 52.5200, 13.4050, 0.05),
    City("Madrid", "Spain", 40.4168, -3.7038, 0.05),
    City("Rome", "Italy", 41.9028, 12.4964, 0.05),
    City("Barcelona", "Spain", 41.3851, 2.1734, 0.04),
    City("Vienna", "Austria", 48.2082, 16.3738, 0.04),
    City("Amsterdam", "Netherlands", 52.3676, 4.9041, 0.04),
    City("Milan", "Italy", 45.4642, 9.1900, 0.04),
    City("Munich", "Germany", 48.1351, 11.5820, 0.03),
    City("Hamburg", "Germany", 53.5511, 9.9937, 0.03),
    City("Prague", "Czech Republic", 50.0755, 14.4378, 0.03),
    City("Brussels", "Belgium", 50.8503, 4.3517, 0.03),
    City("Budapest", "Hungary", 47.4979, 19.0402, 0.03),
    City("Warsaw", "Poland", 52.2297, 21.0122, 0.03),
    City("Lisbon", "Portugal", 38.7223, -9.1393, 0.03),
    City("Stockholm", "Sweden", 59.3293, 18.0686, 0.03),
    City("Copenhagen", "Denmark", 55.6761, 12.5683, 0.03),
    City("Naples", "Italy", 40.8518, 14.2681, 0.02),
    City("Dublin", "Ireland", 53.3498, -6.2603, 0.02),
    City("Athens", "Greece", 37.9838, 23.7275, 0.02),
    City("Zurich", "Switzerland", 47.3769, 8.5417, 0.02),
    City("Valencia", "Spain", 39.4699, -0.3763, 0.02),
    City("Seville", "Spain", 37.3891, -5.9845, 0.02),
    City("Cologne", "Germany", 50.9375, 6.9603, 0.02),
    City("Turin", "Italy", 45.0703, 7.6869, 0.02),
    City("Frankfurt", "Germany", 50.1109, 8.6821, 0.02),
    City("Oslo", "Norway", 59.9139, 10.7522, 0.02),
    City("Helsinki", "Finland", 60.1699, 24.9384, 0.02),
    City("Krakow", "Poland", 50.0647, 19.9450, 0.02),
    City("Lyon", "France", 45.7640, 4.8357, 0.02),
    City("Marseille", "France", 43.2965, 5.3698, 0.02),
    City("Geneva", "Switzerland", 46.2044, 6.1432, 0.02),
    City("Rotterdam", "Netherlands", 51.9225, 4.4792, 0.02),
    City("Stuttgart", "Germany", 48.7758, 9.1829, 0.02),
    City("Leipzig", "Germany", 51.3397, 12.3731, 0.01),
    City("Dresden", "Germany", 51.0504, 13.7373, 0.01),
    City("Porto", "Portugal", 41.1579, -8.6291, 0.01),
    City("Manchester", "UK", 53.4808, -2.2426, 0.01),
    City("Edinburgh", "UK", 55.9533, -3.1883, 0.01),
    City("Bucharest", "Romania", 44.4268, 26.1025, 0.01),
    City("Sofia", "Bulgaria", 42.6977, 23.3219, 0.01),
    City("Zagreb", "Croatia", 45.8150, 15.9819, 0.01),
    City("Bratislava", "Slovakia", 48.1486, 17.1077, 0.01),
    City("Ljubljana", "Slovenia", 46.0569, 14.5058, 0.01),
    City("Vilnius", "Lithuania", 54.6872, 25.2797, 0.01),
    City("Riga", "Latvia", 56.9496, 24.1052, 0.01),
    City("Tallinn", "Estonia", 59.4370, 24.7536, 0.01),
    City("Luxembourg City", "Luxembourg", 49.6116, 6.1319, 0.01),
    City("Reykjavik", "Iceland", 64.1466, -21.9426, 0.01),
]


def stable_hash(name: str) -> int:
    """Process-independent hash of a hospital name."""
    digest = hashlib.sha256(name.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def assign_city(hospital: str, cities: list[City] = CITIES) -> City:
    """Pick a city for a hospital, weighted by city size."""
    position = (stable_hash(hospital) % HASH_BUCKETS) / HASH_BUCKETS
    total_weight = sum(city.weight for city in cities)
    cumulative = 0.0
    for city in cities:
        cumulative += city.weight / total_weight
        if position <= cumulative:
            return city
    return cities[-1]


def jitter(lat: float, lon: float, rng: random.Random) -> tuple[float, float]:
    """Move a point a few kilometres; rural points move further."""
    offset_km = URBAN_OFFSET_KM if rng.random() < URBAN_SHARE else RURAL_OFFSET_KM
    lat_offset = (rng.random() - 0.5) * (offset_km / KM_PER_DEGREE)
    lon_offset = (rng.random() - 0.5) * (offset_km / (KM_PER_DEGREE * math.cos(math.radians(lat))))
    return round(lat + lat_offset, 6), round(lon + lon_offset, 6)


def hospital_location(hospital: str) -> dict:
    name = normalize_name(hospital) or UNKNOWN
    city = assign_city(name)
    latitude, longitude = jitter(city.lat, city.lon, random.Random(stable_hash(name)))
    return {
        "City": city.city,
        "Country": city.country,
        "Latitude": latitude,
        "Longitude": longitude,
    }


def enrich_frame(frame: pd.DataFrame) -> pd.DataFrame:
    """Add City, Country, Latitude and Longitude columns; dates become YYYY-MM-DD."""
    enriched = frame.copy()
    if "Hospital" in enriched.columns:
        hospitals = enriched["Hospital"].fillna("")
    else:
        hospitals = pd.Series("", index=enriched.index)
    locations = {hospital: hospital_location(hospital) for hospital in hospitals.unique()}

    for column in ("City", "Country", "Latitude", "Longitude"):
        enriched[column] = hospitals.map(lambda hospital: locations[hospital][column])
    for column in DATE_COLUMNS:
        if column in enriched.columns:
            enriched[column] = parse_dates(enriched[column]).dt.strftime("%Y-%m-%d").fillna("")

    logger.info(f"Assigned locations to {len(locations)} hospitals")
    return enriched


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="geo_enrichment",
        description="Add synthetic City/Country/Latitude/Longitude columns to the patient dataset.",
    )
    parser.add_argument("input", help="Source CSV file")
    parser.add_argument("output", help="Where to write the enriched CSV")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        frame = read_records(args.input)
    except DataLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    enriched = enrich_frame(frame)
    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    enriched.to_csv(output, index=False)

    print(f"Output saved: {output}")
    print(f"Total rows: {len(enriched)}")
    print(f"Unique hospitals: {enriched['Hospital'].nunique() if 'Hospital' in enriched else 0}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
