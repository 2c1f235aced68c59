"""
Overlay exceptions
"""


class UnknownLayerError(KeyError):
    """No source descriptor is known for the requested layer id"""

    def __init__(self, layerId: str):
        super().__init__(layerId)
        self.layerId = layerId

    def __str__(self) -> str:
        return f"Unknown overlay layer: {self.layerId}"
