"""Extension layer: plugin system via pluggy.

Discovery: entry_points (pip-installed) in the ``obridge.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from obridge.plugins.manager import PluginManager

__all__ = ["PluginManager"]
