"""Bundled template documents (JSON package data)."""
