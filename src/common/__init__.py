"""Shared helpers: logging, HTTP, command execution, workflow I/O."""
