class O2HeaderException(Exception):
    '''Base class to extend in order to throw exception in o2headers.

    It takes a single argument that represents the chain of the fields that
    caused the exception, plus an optional human readable message.
    '''

    def __init__(self, chain, msg=None):
        self.chain = chain
        self.msg = msg
        super().__init__(msg)

    def __str__(self):
        where = '.'.join(self.chain)
        if not where:
            return self.msg or ''

        return f'{where}: {self.msg}' if self.msg else where


class InvalidLength(O2HeaderException):
    '''The input is shorter or longer than the fixed size required.'''
    pass


class MagicMismatch(O2HeaderException):
    pass


class TruncatedBuffer(O2HeaderException):
    '''There are fewer bytes than the header (or its chain) declares.'''
    pass


class UnresolvedField(O2HeaderException):
    '''The field is part of the format but the layout in use doesn't place it.'''
    pass
