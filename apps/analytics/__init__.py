"""Admin dashboard statistics and the provider agenda."""
