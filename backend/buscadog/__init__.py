"""BuscaDog — veterinary clinic locator API."""

__version__ = "0.1.0"
