"""Local persistence for remote-terminal sessions, host keys and entropy seeds."""
