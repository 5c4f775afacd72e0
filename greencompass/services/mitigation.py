"""
mitigation.py — Static catalogue for the dashboard's Mitigation tab.
"""

from greencompass.models.carbon import MitigationOption

MITIGATION_OPTIONS: tuple[MitigationOption, ...] = (
    MitigationOption(
        title="Solar Transition",
        description="Switch 50% of energy to solar to trim ~40% of emissions.",
        impact="High Impact",
    ),
    MitigationOption(
        title="EV Adoption",
        description="Replace one petrol vehicle with an EV to save ~150kg CO2/month.",
        impact="High Impact",
    ),
    MitigationOption(
        title="Waste Segregation",
        description="Composting and segregation curb landfill methane.",
        impact="Medium Impact",
    ),
    MitigationOption(
        title="Demand Response",
        description="Shift heavy loads to off-peak hours to reduce diesel backup.",
        impact="Medium Impact",
    ),
)


def list_options() -> list[MitigationOption]:
    return list(MITIGATION_OPTIONS)
