"""Patient registration service - two-phase registration with pincode confirmation."""

__version__ = "0.1.0"
