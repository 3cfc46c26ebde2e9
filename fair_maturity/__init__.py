"""Repository maturity compliance evaluation.

Grades a source-code repository against a tiered rubric of research software
maturity guidelines and returns a level plus prioritized remediation feedback.
"""

__version__ = "0.1.0"
