"""Built-in maturity guidelines, ordered by tier.

Criterion ids are stable: they key manual answers, check bindings and stored
snapshots, so never renumber an existing entry.
"""

from __future__ import annotations

from fair_maturity.evaluator import CriterionType, Level
from fair_maturity.evaluator.criteria.base import Criterion

AUTO = CriterionType.AUTOMATIC
MANUAL = CriterionType.MANUAL

# ── Novice ────────────────────────────────────────────
NOVICE_CRITERIA = [
    Criterion(
        id=8,
        title="The project is hosted on a web-based developer platform (e.g., GitHub or GitLab)",
        level=Level.NOVICE,
        type=AUTO,
        category="Version control",
    ),
    Criterion(
        id=29,
        title="A version control tool is used to manage the project (e.g., Git)",
        level=Level.NOVICE,
        type=AUTO,
        category="Version control",
    ),
    Criterion(
        id=10,
        title="The software is released under an open-source license (a LICENSE file with the license content is part of the codebase)",
        level=Level.NOVICE,
        type=AUTO,
        category="Licensing",
    ),
    Criterion(
        id=11,
        title="The project includes a basic documentation (e.g. a README file)",
        level=Level.NOVICE,
        type=AUTO,
        category="Documentation",
    ),
    Criterion(
        id=32,
        title="The project includes a README file",
        level=Level.NOVICE,
        type=AUTO,
        category="Documentation",
    ),
    Criterion(
        id=1,
        title="Source files and folders have meaningful names",
        level=Level.NOVICE,
        type=MANUAL,
        category="Code quality",
    ),
    Criterion(
        id=2,
        title="The README describes the purpose of the software",
        level=Level.NOVICE,
        type=MANUAL,
        category="Documentation",
    ),
    Criterion(
        id=3,
        title="The README explains how to install the software",
        level=Level.NOVICE,
        type=MANUAL,
        category="Documentation",
    ),
]

# ── Beginner ──────────────────────────────────────────
BEGINNER_CRITERIA = [
    Criterion(
        id=12,
        title="The documentation states the supported operating systems",
        level=Level.BEGINNER,
        type=AUTO,
        category="Documentation",
    ),
    Criterion(
        id=13,
        title="The documentation states the programming language(s) of the software",
        level=Level.BEGINNER,
        type=AUTO,
        category="Documentation",
    ),
    Criterion(
        id=14,
        title="Dependencies are declared in a standard manifest file (e.g. pyproject.toml, package.json)",
        level=Level.BEGINNER,
        type=AUTO,
        category="Release management",
    ),
    Criterion(
        id=24,
        title="The repository is described with keywords (e.g. GitHub topics)",
        level=Level.BEGINNER,
        type=AUTO,
        category="Metadata",
    ),
    Criterion(
        id=36,
        title="Each collaborator is clearly identified within the project",
        level=Level.BEGINNER,
        type=AUTO,
        category="Collaboration",
    ),
    Criterion(
        id=37,
        title="The project includes a document describing expected contributions (e.g. a CONTRIBUTING file)",
        level=Level.BEGINNER,
        type=AUTO,
        category="Collaboration",
    ),
    Criterion(
        id=38,
        title="Issues or bugs are managed through the development web platform (e.g., GitHub or GitLab issues)",
        level=Level.BEGINNER,
        type=AUTO,
        category="Collaboration",
    ),
    Criterion(
        id=49,
        title="The project includes a change log",
        level=Level.BEGINNER,
        type=AUTO,
        category="Release management",
    ),
    Criterion(
        id=4,
        title="The README includes a basic usage example",
        level=Level.BEGINNER,
        type=MANUAL,
        category="Documentation",
    ),
    Criterion(
        id=5,
        title="The code follows a consistent coding style",
        level=Level.BEGINNER,
        type=MANUAL,
        category="Code quality",
    ),
    Criterion(
        id=6,
        title="Third-party dependencies and their licenses are listed",
        level=Level.BEGINNER,
        type=MANUAL,
        category="Licensing",
    ),
]

# ── Intermediate ──────────────────────────────────────
INTERMEDIATE_CRITERIA = [
    Criterion(
        id=15,
        title="The software includes continuous integration and unit testing",
        level=Level.INTERMEDIATE,
        type=AUTO,
        category="Testing & CI",
    ),
    Criterion(
        id=16,
        title="The code base contains automated tests",
        level=Level.INTERMEDIATE,
        type=AUTO,
        category="Testing & CI",
    ),
    Criterion(
        id=18,
        title="Versions of the software are published as releases",
        level=Level.INTERMEDIATE,
        type=AUTO,
        category="Release management",
    ),
    Criterion(
        id=39,
        title="Issues or bug reports are described as fully as possible (e.g. issue templates, reproducible example)",
        level=Level.INTERMEDIATE,
        type=AUTO,
        category="Collaboration",
    ),
    Criterion(
        id=41,
        title="Every significant change within the code is managed through a pull (or merge) request",
        level=Level.INTERMEDIATE,
        type=AUTO,
        category="Collaboration",
    ),
    Criterion(
        id=55,
        title="The project includes a CITATION.cff file to indicate how to cite the software",
        level=Level.INTERMEDIATE,
        type=AUTO,
        category="Citation",
    ),
    Criterion(
        id=59,
        title="The project defines expected standards of conduct (e.g. a CODE_OF_CONDUCT file)",
        level=Level.INTERMEDIATE,
        type=AUTO,
        category="Community",
    ),
    Criterion(
        id=19,
        title="Tests cover the main features of the software",
        level=Level.INTERMEDIATE,
        type=MANUAL,
        category="Testing & CI",
    ),
    Criterion(
        id=20,
        title="A reference documentation of the API is available",
        level=Level.INTERMEDIATE,
        type=MANUAL,
        category="Documentation",
    ),
    Criterion(
        id=21,
        title="The code is organised in modules with a single responsibility",
        level=Level.INTERMEDIATE,
        type=MANUAL,
        category="Code quality",
    ),
    Criterion(
        id=22,
        title="Release versions follow a documented versioning scheme (e.g. semantic versioning)",
        level=Level.INTERMEDIATE,
        type=MANUAL,
        category="Release management",
    ),
    Criterion(
        id=23,
        title="The documentation explains how to cite the software",
        level=Level.INTERMEDIATE,
        type=MANUAL,
        category="Citation",
    ),
]

# ── Advanced ──────────────────────────────────────────
ADVANCED_CRITERIA = [
    Criterion(
        id=17,
        title="The software includes continuous deployment",
        level=Level.ADVANCED,
        type=AUTO,
        category="Testing & CI",
    ),
    Criterion(
        id=25,
        title="The software has a persistent identifier (e.g. DOI, SWHID) referenced in the README",
        level=Level.ADVANCED,
        type=AUTO,
        category="Citation",
    ),
    Criterion(
        id=30,
        title="Software metadata is provided in a machine-readable file (e.g. codemeta.json)",
        level=Level.ADVANCED,
        type=AUTO,
        category="Metadata",
    ),
    Criterion(
        id=35,
        title="The project has multiple collaborators from the hosting community",
        level=Level.ADVANCED,
        type=AUTO,
        category="Community",
    ),
    Criterion(
        id=42,
        title="Each pull request is reviewed by at least one collaborator",
        level=Level.ADVANCED,
        type=AUTO,
        category="Collaboration",
    ),
    Criterion(
        id=50,
        title="The documentation lists the changes to the codebase between each software release",
        level=Level.ADVANCED,
        type=AUTO,
        category="Release management",
    ),
    Criterion(
        id=26,
        title="Test coverage is measured and reported",
        level=Level.ADVANCED,
        type=MANUAL,
        category="Testing & CI",
    ),
    Criterion(
        id=27,
        title="The documentation is published online and versioned with the software",
        level=Level.ADVANCED,
        type=MANUAL,
        category="Documentation",
    ),
    Criterion(
        id=28,
        title="Static analysis or linters run automatically on every change",
        level=Level.ADVANCED,
        type=MANUAL,
        category="Code quality",
    ),
]

# ── Expert ────────────────────────────────────────────
EXPERT_CRITERIA = [
    Criterion(
        id=34,
        title="The project has multiple collaborators from outside the hosting community",
        level=Level.EXPERT,
        type=AUTO,
        category="Community",
    ),
    Criterion(
        id=43,
        title="The project documents a security policy (e.g. a SECURITY file)",
        level=Level.EXPERT,
        type=AUTO,
        category="Community",
    ),
    Criterion(
        id=31,
        title="The project governance model is documented",
        level=Level.EXPERT,
        type=MANUAL,
        category="Community",
    ),
    Criterion(
        id=33,
        title="Performance or regression benchmarks are run for each release",
        level=Level.EXPERT,
        type=MANUAL,
        category="Testing & CI",
    ),
    Criterion(
        id=40,
        title="The software is distributed through a community package registry (e.g. PyPI, conda-forge, CRAN)",
        level=Level.EXPERT,
        type=MANUAL,
        category="Release management",
    ),
    Criterion(
        id=45,
        title="The documentation includes tutorials for advanced use cases",
        level=Level.EXPERT,
        type=MANUAL,
        category="Documentation",
    ),
    Criterion(
        id=46,
        title="The software is registered in a research software catalogue",
        level=Level.EXPERT,
        type=MANUAL,
        category="Metadata",
    ),
]

GUIDELINES: list[Criterion] = [
    *NOVICE_CRITERIA,
    *BEGINNER_CRITERIA,
    *INTERMEDIATE_CRITERIA,
    *ADVANCED_CRITERIA,
    *EXPERT_CRITERIA,
]
