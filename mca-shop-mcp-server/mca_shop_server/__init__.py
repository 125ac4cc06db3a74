"""MCA Shop storefront and admin client."""

__version__ = "0.1.0"
