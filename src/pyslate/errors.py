class PyslateError(Exception):
    pass


class ConfigError(PyslateError):
    pass


class CacheError(PyslateError):
    """Any reason a cached record could not be served."""

    def __init__(self, fingerprint: str, detail: str = ""):
        self.fingerprint = fingerprint
        self.detail = detail
        msg = f"{fingerprint}: {detail}" if detail else fingerprint
        super().__init__(msg)


class CacheNotFound(CacheError):
    pass


class CacheExpired(CacheError):
    pass


class CacheCorrupt(CacheError):
    pass


class CacheIOError(CacheError):
    pass


class ProviderError(PyslateError, RuntimeError):
    """Network or provider-side failure; the underlying exception is chained as __cause__."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")
