class InvalidDimensionException(Exception):
    """ Exception raised when a cube cannot have (or be solved at) the given side length """
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

class InvalidColorScanException(Exception):
    """ Exception raised when a color scan cannot be mapped onto a cube """
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

class InvalidMoveTokenException(Exception):
    """ Exception raised when a move string contains something that isn't a move """
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

class InvalidTurnException(Exception):
    """ Exception raised when the turn cannot be made """
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

class ImpossibleScrambleException(Exception):
    """ Exception raised when encountering parity or an impossible solve """
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
