"""Match scanner engine — connect package references to vulnerable ranges."""

from vulnmatch.engines.match_scanner.constraints import version_matches_constraints
from vulnmatch.engines.match_scanner.models import MatchCandidate, ScanResult
from vulnmatch.engines.match_scanner.scanner import MatchScanner, filter_candidates
from vulnmatch.engines.match_scanner.schemes import SchemeMapping

__all__ = [
    "MatchCandidate",
    "MatchScanner",
    "ScanResult",
    "SchemeMapping",
    "filter_candidates",
    "version_matches_constraints",
]
