class AehError(Exception):
    pass

class UsageError(AehError):
    pass

class ConfigError(AehError):
    pass

class HistoryError(ConfigError):
    pass

class TransportError(AehError):
    pass

class ProtocolError(AehError):
    def __init__(self, status_code: int):
        super().__init__(f"received non-200 HTTP-status-code ({status_code})")
        self.status_code = status_code

class ShapeError(AehError):
    pass

class Interrupted(AehError):
    def __init__(self, signum: int, name: str = ""):
        super().__init__(f"received signal {name or signum}")
        self.signum = signum

class OutputError(AehError):
    pass
