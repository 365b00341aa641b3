"""Declaration lookup for live classes, modules and methods."""

from locate.introspect import MethodIntrospector, PythonIntrospector
from locate.locator import Candidate, SourceLocator
from locate.methods import MethodRecord
from locate.models import MethodRef, SourceSpan
from locate.modules import ModuleRecord
from locate.sources import as_code, code_from_file, code_from_method, code_from_module

__all__ = [
    "Candidate",
    "MethodIntrospector",
    "MethodRecord",
    "MethodRef",
    "ModuleRecord",
    "PythonIntrospector",
    "SourceLocator",
    "SourceSpan",
    "as_code",
    "code_from_file",
    "code_from_method",
    "code_from_module",
]
