class InvalidCodeError(ValueError):
    def __init__(self, code):
        self.code = code
        super().__init__(f"Invalid access code: {code}")


class AlreadyUsedError(ValueError):
    def __init__(self, code):
        self.code = code
        super().__init__(f"Access code {code} has already been used")
