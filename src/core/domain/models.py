"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation and self-documenting fields (Field) without coupling the
  core to I/O libraries.
- The discovery strategies become a discriminated union that configuration
  can select without a class hierarchy.

Note:
- These models describe *what* a snapshot is made of, not *how* it is fetched.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class ListingEntry(BaseModel):
    """One artifact anchor found on a package listing page."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(
        ...,
        min_length=1,
        description="Absolute artifact URL, already stripped of query and fragment.",
    )
    filename: str = Field(
        ...,
        description="Link text of the anchor (the artifact filename).",
    )


class RetentionBudget(BaseModel):
    """How many distinct versions of a package survive the retention filter.

    At most half of the budget (rounded down) may be spent on pre-releases.
    """

    model_config = ConfigDict(frozen=True)

    keep_recent: int = Field(
        ...,
        ge=1,
        description="Maximum number of distinct versions kept per package.",
    )

    @property
    def at_most_unstable(self) -> int:
        return self.keep_recent // 2


class FullIndexScan(BaseModel):
    """Discover packages by reading every link of the simple index."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["full_index"] = "full_index"
    simple_base: str = Field(..., min_length=1, description="Base URL of the simple index.")
    debug: bool = Field(
        default=False,
        description="Only parse the first 1000 characters of the index document.",
    )


class PopularityQuery(BaseModel):
    """Discover the 1000 most downloaded packages of the last day via BigQuery."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["popularity"] = "popularity"
    project_id: str | None = Field(
        default=None,
        description="Billing project for the query; falls back to the ADC project.",
    )
    debug: bool = Field(
        default=False,
        description="Accepted for symmetry; ignored (with a warning) by this strategy.",
    )


DiscoveryStrategy = Annotated[
    Union[FullIndexScan, PopularityQuery],
    Field(discriminator="kind"),
]
