"""
Fee Auction Engine

Converts protocol trading fees into a single bid token:
- Fee shares unwound from constant-product pairs
- Per-token English auctions with anti-snipe windows
- Escrow accounting that surplus sweeps can never touch
"""

__version__ = "0.1.0"
