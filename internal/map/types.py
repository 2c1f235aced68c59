"""
Map: shared enums, command results and the geolocation contract
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, Protocol, Tuple, runtime_checkable


class SurfaceMode(StrEnum):
    """Which rendering surface is active"""

    FLAT_2D = "2d"
    GLOBE_3D = "3d"


class CommandStatus(StrEnum):
    """Outcome of a map command"""

    OK = "ok"
    # Target surface is not mounted or not ready yet, nothing was done
    NOT_READY = "not-ready"
    # Command has no meaning on the active surface
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True, slots=True)
class CommandResult:
    status: CommandStatus
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status == CommandStatus.OK

    @classmethod
    def success(cls, detail: str = "") -> "CommandResult":
        return cls(CommandStatus.OK, detail)

    @classmethod
    def notReady(cls, detail: str = "") -> "CommandResult":
        return cls(CommandStatus.NOT_READY, detail)

    @classmethod
    def unsupported(cls, detail: str = "") -> "CommandResult":
        return cls(CommandStatus.UNSUPPORTED, detail)


@runtime_checkable
class Geolocator(Protocol):
    """Source of the user's position"""

    async def currentPosition(self) -> Optional[Tuple[float, float]]:
        """(lat, lon), or None when location is unavailable or denied"""
        ...
