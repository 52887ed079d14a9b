"""Service connection (S/A) analysis."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceConnectionAnalysis:
    """What a service connection observation says about its connection."""
    is_not_connected: bool
    has_bung: bool
    has_complete_blockage: bool
    recommendation: str

    @property
    def requires_contractor_confirmation(self) -> bool:
        return self.is_not_connected or self.has_bung or self.has_complete_blockage


_BUNG_WORDS = ("BUNG", "CAP WITHIN LENGTH", "CAPPED", "CAP")

CONNECTED_CONFIRMATION = (
    "Contractor to confirm this has been connected and a cleanse and resurvey is required"
)
BUNG_CONFIRMATION = (
    "Contractor to confirm the bung has been removed and requires cleansing and survey once removed"
)
VERIFY_CONNECTION = "Service connection identified - verify connection status and functionality"


def analyze_service_connection(text: str) -> ServiceConnectionAnalysis:
    """
    Read the connection state from service connection text.

    A complete blockage (or WL 100%) and an unconnected pipe both call for
    connection to be confirmed; a bung or cap calls for its removal to be
    confirmed.
    """
    upper = text.upper()
    not_connected = "NOT CONNECTED" in upper or "NO CONNECTED" in upper
    has_bung = any(word in upper for word in _BUNG_WORDS)
    blocked = "COMPLETE BLOCKAGE" in upper or "WL 100%" in upper

    if blocked or not_connected:
        recommendation = CONNECTED_CONFIRMATION
    elif has_bung:
        recommendation = BUNG_CONFIRMATION
    else:
        recommendation = VERIFY_CONNECTION

    return ServiceConnectionAnalysis(
        is_not_connected=not_connected,
        has_bung=has_bung,
        has_complete_blockage=blocked,
        recommendation=recommendation,
    )
