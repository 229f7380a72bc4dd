"""Core domain, ports, and services."""
