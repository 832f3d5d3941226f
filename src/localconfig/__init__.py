"""
localconfig: schema-driven reconciliation of local configuration files.

Defines the variables an installation needs, loads their current values from
the settings file or the process environment, fills gaps with defaults and
persists a deterministic settings file back to disk.
"""

__version__ = "0.3.0"
