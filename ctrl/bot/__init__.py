"""Slack bot front end for the project registry."""
