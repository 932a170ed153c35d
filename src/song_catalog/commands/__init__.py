"""Command handlers for the Song Catalog CLI."""
