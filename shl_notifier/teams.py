"""SHL team codes and their display names."""

from __future__ import annotations

TEAM_SHORT_NAMES: dict[str, str] = {
    "BIF": "Brynäs",
    "DIF": "Djurgården",
    "FBK": "Färjestad",
    "FHC": "Frölunda",
    "HV71": "HV71",
    "IKO": "Oskarshamn",
    "LHC": "Linköping",
    "LHF": "Luleå",
    "LIF": "Leksand",
    "MIF": "Malmö",
    "MODO": "MoDo",
    "OHK": "Örebro",
    "RBK": "Rögle",
    "SAIK": "Skellefteå",
    "TIK": "Timrå",
    "VLH": "Växjö",
}


def get_short_name(team_code: str) -> str:
    """Return the display name for a team code, or the code itself if unknown."""
    return TEAM_SHORT_NAMES.get(team_code.upper(), team_code)
