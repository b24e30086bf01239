"""Stream formats, video metadata, comment threads and a subscription store for a video client."""

__version__ = "0.1.0"
__all__ = ["channels", "definitions", "streams", "threads", "video"]