"""Subprocess, HTTP and logging helpers."""
