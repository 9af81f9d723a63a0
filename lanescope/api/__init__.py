"""Read API over scaled lane views."""
