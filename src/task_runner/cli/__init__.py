"""Demo CLI: composition root (bootstrap.py) and entrypoint (main.py)."""
