"""HTTP surface for the world machine."""
