"""Upload images to Cloudflare R2 and print their public URLs."""

__version__ = "0.1.0"
