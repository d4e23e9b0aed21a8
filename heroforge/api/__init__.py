"""API routers for HeroForge."""
