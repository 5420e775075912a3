"""CleanConnect: marketplace API connecting clients with cleaning professionals."""

__version__ = "0.1.0"
