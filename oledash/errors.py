"""
Exception hierarchy shared by every oledash subsystem.
"""


class OledashError(Exception):
    """Base class for all oledash errors"""


class ConfigurationError(OledashError):
    """Raised at construction time for a broken widget or display configuration"""


class DataUnavailableError(OledashError):
    """Raised by readers and update() when a data source cannot produce a sample"""
