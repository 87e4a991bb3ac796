"""Adapters — Nango, Slack and HTTP implementations of the ports."""
