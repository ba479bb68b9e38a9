"""vulnmatch — match uploaded package references against vulnerable version ranges."""

__version__ = "0.1.0"
