"""Assets domain package.

This package contains the asset registry that gives every asset code its own dimension,
and the Unit / Quantity value types that carry amounts together with their asset.
"""
