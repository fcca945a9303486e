"""Cluster configuration helpers."""
