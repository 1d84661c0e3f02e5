"""Gelato wholesale operations service."""
