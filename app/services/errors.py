class ParseError(ValueError):
    """An uploaded file is structurally unusable (missing sheet, no rows)."""
