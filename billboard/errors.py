class BillboardError(Exception):
    pass


class SourceUnavailableError(BillboardError):
    def __init__(self, url: str) -> None:
        super().__init__(f"Unable to reach {url}")


class DecodeError(BillboardError):
    pass


class MalformedArtistFieldError(BillboardError):
    def __init__(self, artist: str) -> None:
        super().__init__(f"Artist field has no second line: {artist!r}")


class StoreUnavailableError(BillboardError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Song store unavailable: {path}")
