"""Pure services over the domain: validation, publishing and consuming helpers."""
