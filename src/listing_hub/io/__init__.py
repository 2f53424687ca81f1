"""I/O layer: archive readers and site writers."""
