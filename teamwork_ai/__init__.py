"""teamwork-ai - AI-assisted task assignment for Teamwork.com."""

__version__ = "0.1.0"
