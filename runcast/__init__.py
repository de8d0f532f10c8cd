"""Runcast: weather advice for runners."""
