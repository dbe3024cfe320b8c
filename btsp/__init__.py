"""btsp: front-end for bootstrap (.btsp) scripts."""

__version__ = "0.1.0"
