"""Evently event listing and RSVP service."""
