class WordQuizError(Exception):
    pass


class IllegalWord(WordQuizError):
    def __init__(self, word: str):
        super().__init__(f"Not in word list: {word}")
        self.word = word


class InputRejected(WordQuizError):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class NetworkUnavailable(WordQuizError):
    """Word list or daily-word store could not be reached."""


class LookupUnavailable(WordQuizError):
    """Dictionary or translation lookup failed; the detail is just omitted."""
