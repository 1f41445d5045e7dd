"""Tournament bracket construction engine."""
