from .key_validator import KeyValidator

__all__ = ["KeyValidator"]
