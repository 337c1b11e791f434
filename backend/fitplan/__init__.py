"""FitPlan: accounts, body profiles and AI-generated workout plans."""

__version__ = "0.1.0"
