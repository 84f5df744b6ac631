"""Exchange domain package.

This package contains AssetsPair and Rate (the atomic conversion fact), ExchangeMarket
(a read-only collection of such facts) and the conversion engine working on top of them.
"""
