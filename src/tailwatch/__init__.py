"""Run and supervise TailwindCSS CLI watchers."""

__version__ = "0.1.0"
