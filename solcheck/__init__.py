"""Convention checks for Foundry-style Solidity projects."""

__version__ = "0.1.0"
