"""Domain layer: catalog, spreadsheet, playback, access and cloud."""
