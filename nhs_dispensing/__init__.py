"""NHS pharmacy and appliance contractor dispensing — load, clean, aggregate."""

__version__ = "1.0.0"
