"""skill-palette - namespace-aware terminal skill picker."""

__version__ = "0.3.0"
