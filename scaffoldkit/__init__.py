"""scaffoldkit — project scaffolding from declarative action files."""

__version__ = "0.1.0"
