"""Portfolio domain - editor profiles, public portfolio pages and view tracking"""
