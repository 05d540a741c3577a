# Use an explicit re-export https://github.com/astral-sh/ruff/issues/5697#issuecomment-1631647211

from tracefn_core.models.models import (
    REDACTED as REDACTED,
    Profile as Profile,
    Level as Level,
    AnnotationOptions as AnnotationOptions,
    Parameter as Parameter,
    FunctionDescriptor as FunctionDescriptor,
    ArgumentDisplay as ArgumentDisplay,
    GeneratedFunction as GeneratedFunction,
    TransformResult as TransformResult,
    BuildTask as BuildTask,
    BuildResult as BuildResult,
)

from tracefn_core.models.config import (
    TraceFnConfig as TraceFnConfig,
)
