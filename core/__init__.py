"""Journey core - shared infrastructure (data paths)."""
