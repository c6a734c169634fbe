"""HTTP adapter for the imaging tutor."""
