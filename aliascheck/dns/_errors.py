'''
Exceptions raised while resolving and verifying hostnames.

Parent of all of them: AliascheckError
'''


class AliascheckError(Exception):
    ...


class ConfigError(AliascheckError):
    '''
    Raised when the system resolver configuration cannot be read.
    Fatal at startup.
    '''


class InvalidHostnameError(AliascheckError, ValueError):
    '''
    Raised when a hostname cannot be turned into a domain name.

    Parent: AliascheckError, ValueError
    '''


class DelegationError(AliascheckError):
    '''
    Raised when the delegation walk fails at some label.

    Parent: AliascheckError
    '''

    def __init__(self, suffix: str, cause: BaseException) -> None:
        self.suffix: str = suffix
        self.cause: BaseException = cause
        super().__init__(f"error getting NS for {suffix!r}: {cause}")


class QueryError(AliascheckError):
    '''
    Raised when the ANY or A exchange of a lookup fails.

    Parent: AliascheckError
    '''

    def __init__(self, query_type: str, fqdn: str, cause: BaseException) -> None:
        self.query_type: str = query_type
        self.fqdn: str = fqdn
        self.cause: BaseException = cause
        super().__init__(f"error getting {query_type} for {fqdn!r}: {cause}")


class VerificationError(AliascheckError):
    '''
    Raised when one side of a verification could not be resolved.

    Parent: AliascheckError
    '''

    def __init__(self, hostname: str, message: str) -> None:
        self.hostname: str = hostname
        self.message: str = message
        super().__init__(f"{hostname}: {message}")
