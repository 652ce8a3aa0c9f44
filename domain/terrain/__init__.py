"""Terrain Bounded Context.

Responsible for physical geography and line-of-sight analysis:
- Value Objects: GeoPoint, ElevationProfile, Building, Obstruction, LoSResult
- Services: great_circle_distance_km, interpolate_path, earth_bulge_m,
  analyze_line_of_sight, terrain_stats
- Ports: ElevationRepository, BuildingRepository
"""
