"""Build Helm charts from Kubernetes manifests: decoding, values, metadata and chart output."""

__version__ = "0.1.0"