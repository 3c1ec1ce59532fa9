from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field


def discounted_total(*, unit_price: float, seat_count: int, discount_percent: float) -> float:
    """Total after discount, rounded to cents."""

    return round(unit_price * seat_count * (1 - discount_percent / 100), 2)


class ProposalTerms(BaseModel):
    """An immutable view of the negotiated commercial terms."""

    model_config = ConfigDict(frozen=True)

    discount_percent: float = Field(ge=0, le=100)
    unit_price: float = Field(gt=0)
    seat_count: int = Field(gt=0)
    total: float = Field(ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def list_price(self) -> float:
        return round(self.unit_price * self.seat_count, 2)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def discount_amount(self) -> float:
        return round(self.list_price - self.total, 2)

    @staticmethod
    def priced(*, unit_price: float, seat_count: int, discount_percent: float) -> ProposalTerms:
        return ProposalTerms(
            discount_percent=discount_percent,
            unit_price=unit_price,
            seat_count=seat_count,
            total=discounted_total(
                unit_price=unit_price,
                seat_count=seat_count,
                discount_percent=discount_percent,
            ),
        )


class ProposalRecord:
    """The single shared proposal of a session.

    The only write path is :meth:`apply_revision`, which replaces discount and
    total in one assignment.
    """

    def __init__(self, initial: ProposalTerms) -> None:
        self._initial = initial
        self._terms = initial

    @property
    def initial(self) -> ProposalTerms:
        return self._initial

    def read(self) -> ProposalTerms:
        return self._terms

    def apply_revision(self, new_discount_percent: float) -> ProposalTerms:
        current = self._terms
        # Validation happens before the swap so a bad discount leaves the record untouched.
        revised = ProposalTerms.priced(
            unit_price=current.unit_price,
            seat_count=current.seat_count,
            discount_percent=new_discount_percent,
        )
        self._terms = revised
        return revised
