"""Allow running as ``python -m mca_shop_server``."""

from .cli import main

main()
