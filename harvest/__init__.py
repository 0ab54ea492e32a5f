"""Fetch a single HTML page and extract structured records from it."""
