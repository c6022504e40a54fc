class StrategyForgeError(Exception):
    pass


class ConfigError(StrategyForgeError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"Configuration error: {self.message}"


class InvalidStrategyError(StrategyForgeError):
    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("; ".join(errors))

    def __str__(self) -> str:
        rendered = "\n".join(f"- {item}" for item in self.errors)
        return f"Strategy validation failed:\n{rendered}"
