"""Chat between a client and a provider about an approved quote."""
