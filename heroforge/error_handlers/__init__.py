"""Exception-to-response mapping."""
