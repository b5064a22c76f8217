"""Declaration event vocabulary consumed by the resolver driver.

Events are produced in source document order. Resolution depends on that
order, not only on nesting: two bare directives in the same scope open two
different windows for the definitions that follow them.
"""

from dataclasses import dataclass
from enum import Enum

from ruby_visibility.models import SourceSite, Visibility


class ScopeKind(Enum):
    """Kind of lexical scope a frame represents."""

    TOP_LEVEL = "top_level"
    TYPE_BODY = "type_body"
    SINGLETON_CONTEXT_BODY = "singleton_context_body"
    TRANSPARENT_SUB_SCOPE = "transparent_sub_scope"


class DirectiveForm(Enum):
    """Whether a visibility directive changes the default or names methods.

    BARE: `private` on its own line; affects later definitions in the scope.

    TARGETED: `private :a, :b` or `private def a`; affects only the names.
    """

    BARE = "bare"
    TARGETED = "targeted"


@dataclass(frozen=True, slots=True)
class ScopeOpen:
    """Start of a scope body. `name` is set for type bodies only."""

    kind: ScopeKind
    name: str | None = None
    site: SourceSite | None = None


@dataclass(frozen=True, slots=True)
class ScopeClose:
    """End of the innermost open scope."""

    site: SourceSite | None = None


@dataclass(frozen=True, slots=True)
class VisibilityDirective:
    """A `public` / `private` / `protected` call.

    Attributes:
        form: Bare or targeted
        level: Visibility the directive applies
        targets: Method names for targeted directives, empty for bare ones
        site: Location of the directive call

    """

    form: DirectiveForm
    level: Visibility
    targets: tuple[str, ...] = ()
    site: SourceSite | None = None

    @classmethod
    def bare(
        cls, level: Visibility, site: SourceSite | None = None
    ) -> "VisibilityDirective":
        return cls(DirectiveForm.BARE, level, (), site)

    @classmethod
    def targeted(
        cls,
        level: Visibility,
        targets: tuple[str, ...],
        site: SourceSite | None = None,
    ) -> "VisibilityDirective":
        return cls(DirectiveForm.TARGETED, level, targets, site)


@dataclass(frozen=True, slots=True)
class MethodDef:
    """An instance method definition (`def name`, block or endless body)."""

    identifier: str
    site: SourceSite


@dataclass(frozen=True, slots=True)
class SingletonMethodDef(MethodDef):
    """A `def self.name` definition outside a singleton context body."""

    pass


DeclarationEvent = (
    ScopeOpen | ScopeClose | VisibilityDirective | MethodDef | SingletonMethodDef
)
