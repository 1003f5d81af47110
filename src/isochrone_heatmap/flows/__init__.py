"""
Prefect flows.

Flows:
- isochrone: Compute a travel-time heatmap and save it as JSON

Usage (local):
    python -m isochrone_heatmap.flows.isochrone

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    isochrone-heatmap build --lat 37.5665 --lng 126.978
"""
