"""Evidence ledger and resolved field views."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import MULTI_VALUED_FIELDS, ResolutionMethod, TrustTier

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from .claims import Claim


class TrustRegressionError(RuntimeError):
    """Raised when a resolution would replace a higher-trust value with a lower one."""


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldEvidence:
    """Resolved view of one field."""

    field: str
    value: str
    method: ResolutionMethod
    confidence: float
    tier: TrustTier
    is_conflict: bool = False
    contributing_claims: tuple[Claim, ...] = ()

    @property
    def is_resolved(self) -> bool:
        return bool(self.value.strip())

    @property
    def source_domains(self) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for claim in self.contributing_claims:
            seen.setdefault(claim.source_domain, None)
        return tuple(seen)


@dataclass(slots=True)
class EvidenceLedger:
    """Append-only claim store for one item plus the current resolution per field.

    Claims are only ever appended. Resolutions are written by the trust
    resolver through :meth:`record_resolution`, which refuses to lower the
    tier of a field once a higher-tier value has been recorded.
    """

    _claims: dict[str, list[Claim]] = field(default_factory=lambda: defaultdict(list))
    _resolved: dict[str, FieldEvidence] = field(default_factory=dict[str, FieldEvidence])

    def append(self, claim: Claim) -> None:
        self._claims[claim.field].append(claim)

    def extend(self, claims: Iterable[Claim]) -> None:
        for claim in claims:
            self.append(claim)

    def claims_for(self, field_name: str) -> tuple[Claim, ...]:
        return tuple(self._claims.get(field_name, ()))

    def fields(self) -> tuple[str, ...]:
        return tuple(name for name, claims in self._claims.items() if claims)

    def resolvable_fields(self) -> tuple[str, ...]:
        return tuple(name for name in self.fields() if name not in MULTI_VALUED_FIELDS)

    def all_claims(self) -> Iterator[Claim]:
        for claims in self._claims.values():
            yield from claims

    def __len__(self) -> int:
        return sum(len(claims) for claims in self._claims.values())

    def resolution(self, field_name: str) -> FieldEvidence | None:
        return self._resolved.get(field_name)

    @property
    def resolutions(self) -> dict[str, FieldEvidence]:
        return dict(self._resolved)

    def record_resolution(self, evidence: FieldEvidence) -> FieldEvidence | None:
        """Store ``evidence`` for its field and return the previous resolution."""

        previous = self._resolved.get(evidence.field)
        if previous is not None and evidence.tier < previous.tier:
            raise TrustRegressionError(
                f"Refusing to replace {evidence.field!r} resolved at tier "
                f"{previous.tier.name} with a tier {evidence.tier.name} value"
            )
        self._resolved[evidence.field] = evidence
        return previous
