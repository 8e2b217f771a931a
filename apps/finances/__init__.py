"""Payment links and payment summaries for approved quotes."""
