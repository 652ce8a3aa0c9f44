"""LoRa Link Planner Domain Layer.

This package contains the core link-feasibility logic organized by bounded contexts:
- coverage: RF link calculator (sensitivity, path loss, link budget, range)
- terrain: Physical geography, elevation profiles, line-of-sight analysis
- link: Combined link analysis across both contexts
"""

# Imports alphabetized per project style (isort)
from domain import coverage, link, terrain

__all__ = ["coverage", "link", "terrain"]
