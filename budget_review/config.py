"""Settings shared by the review components."""

import os
from dataclasses import dataclass

_ENV_PREFIX = "BUDGET_REVIEW_"


@dataclass(frozen=True)
class ReviewSettings:
    """Tunable conventions of the review core.

    Parameters
    ----------
    tag_delimiter : str
        Separator used when tags are supplied as a single string.
    default_filter : str
        Lifecycle filter applied when a query names none.
    no_admin_label : str
        Listing sentinel for investments without administrator.
    no_valuators_label : str
        Listing sentinel for investments without valuators.
    export_filename : str
        File name suggested to the export transport.
    """

    tag_delimiter: str = ","
    default_filter: str = "without_admin"
    no_admin_label: str = "No admin assigned"
    no_valuators_label: str = "No valuators assigned"
    export_filename: str = "budget_investments.csv"

    def __post_init__(self) -> None:
        if not self.tag_delimiter:
            raise ValueError("tag_delimiter must not be empty")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "ReviewSettings":
        """Build settings from ``BUDGET_REVIEW_*`` environment variables.

        Parameters
        ----------
        environ : dict[str, str], optional
            Mapping to read from. Defaults to ``os.environ``.

        Returns
        -------
        ReviewSettings
            Settings with every variable that is set overriding its default.
        """
        environ = os.environ if environ is None else environ
        overrides = {}
        for name in cls.__dataclass_fields__:
            value = environ.get(_ENV_PREFIX + name.upper())
            if value is not None:
                overrides[name] = value
        return cls(**overrides)


DEFAULT_SETTINGS = ReviewSettings()
