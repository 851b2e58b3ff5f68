"""Pointer motion coalescing, key remapping, configuration, certificates and DNS resolution for a software KVM."""

__version__ = "0.10.0"