"""HTTP surface for the closet service."""
