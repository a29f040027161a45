"""Tools for the XFS disk image and parts of the XSM machine of the eXpOS teaching system."""

__version__ = "0.1.0"
__all__ = ["xfs", "xsm"]