"""Exception types raised by the upstream client and the record store."""


class WeatherLookupError(Exception):
    pass


class UpstreamUnavailable(WeatherLookupError):
    """Transport failure talking to the weather provider.

    Covers timeouts, connection errors, non-success statuses and bodies that
    are not JSON. Distinct from an empty (not found) result.
    """

    def __init__(self, step: str, address: str, detail: str = ""):
        self.step = step
        self.address = address
        self.detail = detail
        super().__init__(f"upstream {step} failed for {address!r}: {detail}")


class ValidationError(WeatherLookupError):
    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        super().__init__(
            "invalid forecast record: "
            + ", ".join(f"{k} {v}" for k, v in sorted(self.errors.items()))
        )

    @property
    def fields(self) -> list[str]:
        return sorted(self.errors)


class PersistenceFailure(WeatherLookupError):
    pass
