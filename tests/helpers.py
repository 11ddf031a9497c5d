import httpx

UPSTREAM_URL = 'https://api.frankfurter.dev/v1/'


def make_response(status_code: int = 200, json_data=None, path: str = 'latest', text: str = '') -> httpx.Response:
    """Build a real httpx.Response bound to a request so raise_for_status works."""
    request = httpx.Request('GET', UPSTREAM_URL + path)
    if json_data is not None:
        return httpx.Response(status_code, json=json_data, request=request)
    return httpx.Response(status_code, text=text, request=request)


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


BAD_CURRENCIES = ['TRY', 'PLN', 'THB', 'MXN']
