"""SellerFees: marketplace commission calculator and inverse pricing solvers."""

__version__ = "1.0.0"
