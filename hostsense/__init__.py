"""hostsense - host environment queries exposed as callable tools."""

__version__ = "0.1.0"
