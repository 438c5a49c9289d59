"""Gameplay logic. NO UI DEPENDENCIES."""
