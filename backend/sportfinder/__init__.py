"""Sports Near Me backend: place resolution and distance-ranked event search."""
