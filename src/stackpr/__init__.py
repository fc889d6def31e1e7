"""stackpr - publish local commits as stacked review branches."""

__version__ = "0.1.0"
