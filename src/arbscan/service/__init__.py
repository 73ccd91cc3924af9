"""HTTP service exposing the scanner."""

from arbscan.service.server import create_app


__all__ = ["create_app"]
