"""TripDesk: travel agency workspace."""
