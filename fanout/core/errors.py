class FanoutError(Exception):
    pass


class InputContractError(FanoutError):
    pass


class RenderError(FanoutError):
    pass


class MissingHostError(RenderError):
    def __init__(self) -> None:
        super().__init__("No valid host header found!")


class MalformedRequestError(RenderError):
    pass


class ResponseParseError(FanoutError):
    pass


class PersistenceError(FanoutError):
    def __init__(self, key: str, error: Exception) -> None:
        super().__init__(f"Failed to write {key}: {error}")
        self.key = key
        self.error = error


class ConfigurationError(FanoutError):
    pass
