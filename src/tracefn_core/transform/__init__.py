from tracefn_core.transform.annotation_parser import (
    parse_annotation as parse_annotation,
    render_options as render_options,
)
from tracefn_core.transform.signature_extractor import (
    extract_signature as extract_signature,
    describe_function as describe_function,
)
from tracefn_core.transform.argument_formatter import (
    format_arguments as format_arguments,
    render_arguments as render_arguments,
    join_arguments as join_arguments,
)
from tracefn_core.transform.code_generator import (
    generate_function as generate_function,
    resolve_level as resolve_level,
)
from tracefn_core.transform.capabilities import (
    StaticCapabilityChecker as StaticCapabilityChecker,
    RuntimeCapabilityChecker as RuntimeCapabilityChecker,
)
from tracefn_core.transform.scanner import (
    TraceFnTransformer as TraceFnTransformer,
    transform_source as transform_source,
)
