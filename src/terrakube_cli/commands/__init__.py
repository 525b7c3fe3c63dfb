"""Built-in command groups: resource commands and ``config``."""
