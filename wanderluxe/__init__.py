"""WanderLuxe: AI-curated hotel offer packages."""

__version__ = "0.1.0"
