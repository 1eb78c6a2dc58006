"""Lightweight Linux resource monitor: CPU, memory, processes, disks, network and battery."""

__version__ = "0.1.0"