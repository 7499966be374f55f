from .validation import is_valid_address, normalize_private_key, parse_amount, format_units

__all__ = ["is_valid_address", "normalize_private_key", "parse_amount", "format_units"]
