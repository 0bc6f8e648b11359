"""gha-pin: pin GitHub Actions to commit SHAs that match their version tags."""

__version__ = "0.1.0"
