"""Host metrics sampling agent."""

__version__ = "0.4.0"
