"""Data models for resolution results."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Visibility(str, Enum):
    """Effective access level of a method."""

    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"


class SourceSite(BaseModel):
    """Location of a construct in the source file."""

    model_config = ConfigDict(frozen=True)

    line_start: int  # 1-based
    line_end: int | None = None
    column: int = 0  # 0-based


class ResolvedMethodModel(BaseModel):
    """Final visibility of one method definition."""

    identifier: str
    site: SourceSite
    visibility: Visibility
    owner: str | None = None  # "Outer::Inner", None at top level
    singleton: bool = False


class ClassificationDiagnosticModel(BaseModel):
    """A construct the classifier could not interpret and ignored."""

    message: str
    site: SourceSite | None = None


class ResolutionResult(BaseModel):
    """Records and recoverable diagnostics for one resolution run."""

    records: list[ResolvedMethodModel] = []
    diagnostics: list[ClassificationDiagnosticModel] = []
    source: str | None = None

    def find(
        self, identifier: str, owner: str | None = None
    ) -> list[ResolvedMethodModel]:
        """Return records for a method name, optionally limited to one owner."""
        return [
            record
            for record in self.records
            if record.identifier == identifier
            and (owner is None or record.owner == owner)
        ]

    def public_methods(self) -> list[ResolvedMethodModel]:
        """Return records resolved as public."""
        return self._with_visibility(Visibility.PUBLIC)

    def private_methods(self) -> list[ResolvedMethodModel]:
        """Return records resolved as private."""
        return self._with_visibility(Visibility.PRIVATE)

    def protected_methods(self) -> list[ResolvedMethodModel]:
        """Return records resolved as protected."""
        return self._with_visibility(Visibility.PROTECTED)

    def _with_visibility(self, visibility: Visibility) -> list[ResolvedMethodModel]:
        return [r for r in self.records if r.visibility is visibility]
