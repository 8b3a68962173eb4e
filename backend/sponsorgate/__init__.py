"""Gasless transaction sponsorship and dApp interaction verification on Sui."""

__version__ = "0.1.0"
