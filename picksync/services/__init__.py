"""ESPN client, season resolution and the sync pipeline."""
