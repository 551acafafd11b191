"""Ports, error kinds and cancellation primitives shared by tasks and executors."""
