"""xmfconv command line interface."""
