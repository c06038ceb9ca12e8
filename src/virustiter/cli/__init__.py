"""virustiter CLI."""
