"""ShiftCensus scheduling backend."""
