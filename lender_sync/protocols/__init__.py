"""Protocol-specific decoding and math."""
