"""Storage layer.

JSON persistence of rule sets and loading of lexicon/inventory inputs.
"""

from .loaders import (
    read_sca_config,
    load_sca_config,
    save_sca_config,
    load_lexicon,
    load_inventory,
)

__all__ = [
    "read_sca_config",
    "load_sca_config",
    "save_sca_config",
    "load_lexicon",
    "load_inventory",
]
