"""Client for the Gnocchi v1 metric API: archive policies, metrics and measures."""

__version__ = "0.1.0"
__all__ = ["client", "archivepolicies", "measures", "metrics"]