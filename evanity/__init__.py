"""evanity - difficulty estimation and matching for vanity Ethereum addresses."""

__version__ = "0.3.0"
