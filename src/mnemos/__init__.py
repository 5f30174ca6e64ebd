"""mnemos: memory augmentation and pluggable agents for conversational flows."""

__version__ = "0.1.0"
