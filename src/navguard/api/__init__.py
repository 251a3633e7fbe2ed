"""HTTP surface for the browser shell."""
