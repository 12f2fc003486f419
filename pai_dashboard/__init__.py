"""PAI Agent Dashboard -- real-time terminal view of a simulated agent fleet."""

__version__ = "0.2.0"
