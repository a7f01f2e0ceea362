"""Services Layer — orchestrates upstream calls around the pure core queries."""
