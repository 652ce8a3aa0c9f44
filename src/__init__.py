"""Infrastructure layer for the LoRa link planner.

Adapters implementing the domain ports live under `src/infrastructure/`.
"""
