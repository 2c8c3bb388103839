class VineFilterError(Exception):
    def __init__(self, text):
        self.text = text

    def __str__(self):
        return self.text


class DecodeError(VineFilterError):
    pass


class MissingFieldError(VineFilterError):
    pass


class TypeMismatchError(VineFilterError):
    pass


class FilterDefinitionError(VineFilterError):
    pass


class DuplicateFilterError(VineFilterError):
    pass


class NoFilterError(VineFilterError):
    pass
