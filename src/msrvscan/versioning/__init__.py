"""Version parsing, release models and release filtering."""
