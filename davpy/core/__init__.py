"""Core of davpy: path model, protocol client, listing parser, view and uploads."""
