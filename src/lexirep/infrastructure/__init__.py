# Infrastructure Package
from .deck_file import YamlDeckRepository

__all__ = ["YamlDeckRepository"]
