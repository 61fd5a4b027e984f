"""HLS playlist helpers."""
