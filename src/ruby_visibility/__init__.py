"""Ruby method visibility resolver.

Computes the effective visibility (public, private or protected) of every
method definition in a Ruby file by replaying visibility directives in
source order across class, module, `class << self` and concern scopes.

Pipeline: RubySourceParser → EventClassifier → ResolverDriver → ResultEmitter
"""

from ruby_visibility.classifier import EventClassifier
from ruby_visibility.config import ResolverConfig
from ruby_visibility.driver import ResolverDriver
from ruby_visibility.emitter import ResultEmitter
from ruby_visibility.errors import (
    ClassificationError,
    MalformedStreamError,
    ParserError,
    ResolverConfigError,
    ResolverInputError,
    VisibilityResolverError,
)
from ruby_visibility.events import (
    DeclarationEvent,
    DirectiveForm,
    MethodDef,
    ScopeClose,
    ScopeKind,
    ScopeOpen,
    SingletonMethodDef,
    VisibilityDirective,
)
from ruby_visibility.frames import ClosedFrame, ScopeFrame, ScopeFrameStack
from ruby_visibility.models import (
    ClassificationDiagnosticModel,
    ResolutionResult,
    ResolvedMethodModel,
    SourceSite,
    Visibility,
)
from ruby_visibility.resolver import VisibilityResolver

__all__ = [
    # Facade
    "VisibilityResolver",
    "ResolverConfig",
    # Pipeline components
    "EventClassifier",
    "ResolverDriver",
    "ResultEmitter",
    "ScopeFrameStack",
    "ScopeFrame",
    "ClosedFrame",
    # Events
    "DeclarationEvent",
    "DirectiveForm",
    "MethodDef",
    "ScopeClose",
    "ScopeKind",
    "ScopeOpen",
    "SingletonMethodDef",
    "VisibilityDirective",
    # Models
    "ClassificationDiagnosticModel",
    "ResolutionResult",
    "ResolvedMethodModel",
    "SourceSite",
    "Visibility",
    # Errors
    "ClassificationError",
    "MalformedStreamError",
    "ParserError",
    "ResolverConfigError",
    "ResolverInputError",
    "VisibilityResolverError",
]
