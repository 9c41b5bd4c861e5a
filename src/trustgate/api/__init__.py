"""HTTP surface for the trust engine."""
