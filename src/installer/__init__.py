"""Package manager install helpers and installed-tool probes."""
