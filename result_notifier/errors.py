class ConfigurationError(ValueError):
    """Invalid notifier configuration. Raised only while initializing."""

    def __init__(self, key: str, message: str):
        super().__init__(message)
        self.key = key
