"""Driver for brushless motor control modules over a CRC-checked serial bus."""

__version__ = "0.1.0"