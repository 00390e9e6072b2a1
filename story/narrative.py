"""Narrative text for every scroll step, in Dutch, one list per chart.

The number of entries per chart must match that chart's reveal table.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class StepText:
    body: str
    heading: Optional[str] = None


@dataclass(frozen=True)
class Section:
    name: str
    title: str
    chart_id: str
    scrolly_id: str
    steps: List[StepText]


BUDGET = Section(
    name="budget",
    title="De begroting",
    chart_id="chart-bezuinigingen",
    scrolly_id="scrolly-bezuinigingen",
    steps=[
        StepText("Meer geld, minder opgelost", heading="De politie kreeg er miljarden bij"),
        StepText(
            "Kabinet na kabinet beloofde meer blauw op straat. "
            "Hoeveel geld ging er de afgelopen tien jaar naar de politie?"
        ),
        StepText("De politiebegroting was in 2015 nog € 5,1 miljard."),
        StepText("Sindsdien groeide de begroting elk jaar, tot bijna € 8 miljard in 2025."),
        StepText(
            "Als de begroting alleen was meegegroeid met de inflatie, "
            "had de politie veel minder te besteden gehad."
        ),
        StepText(
            "Opgeteld kreeg de politie zo € 9,5 miljard extra "
            "bovenop wat inflatie alleen zou verklaren."
        ),
        StepText("En de politie gaf elk jaar nog meer uit dan begroot: de begroting werd structureel overschreden."),
    ],
)

CRIME = Section(
    name="crime",
    title="Criminaliteit",
    chart_id="chart-criminaliteit",
    scrolly_id="scrolly-criminaliteit",
    steps=[
        StepText("Wat kreeg de samenleving daarvoor terug?", heading="Minder misdrijven"),
        StepText("Het aantal geregistreerde misdrijven daalde in tien jaar met bijna een derde."),
        StepText("Geweldsmisdrijven bleven ongeveer even vaak voorkomen."),
        StepText("De daling komt vooral van vermogensmisdrijven, zoals inbraak en diefstal."),
        StepText("Minder misdrijven, meer geld: dan zou je verwachten dat er meer zaken worden opgelost."),
    ],
)

CLEARANCE = Section(
    name="clearance",
    title="Opheldering",
    chart_id="chart-opheldering",
    scrolly_id="scrolly-opheldering",
    steps=[
        StepText("Hoeveel misdrijven lost de politie op?", heading="Ophelderingspercentage"),
        StepText("Het ophelderingspercentage bleef al die jaren vrijwel gelijk."),
        StepText(
            "Van de vermogensmisdrijven wordt nog geen één op de tien opgelost, "
            "ondanks miljarden extra."
        ),
    ],
)

SECTIONS: Dict[str, Section] = {s.name: s for s in (BUDGET, CRIME, CLEARANCE)}

PAGE_TITLE = "Meer geld voor de politie, evenveel opgelost"
LOAD_ERROR_MESSAGE = "De gegevens konden niet worden geladen."
