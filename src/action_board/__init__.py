"""Action board: a checklist with completion feedback and AI task prioritization."""

__version__ = "0.1.0"
