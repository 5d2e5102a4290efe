# code_gen/synthesizer.py
"""Turns one eligible preview function into the text of its screenshot test."""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from ..config import PROVIDER_ARGUMENT
from ..symbols import Annotation, Parameter, ValueArgument
from ..type_utils import (collect_type_imports, escape_identifier, is_implicit_import, name_ref,
                          resolve_name_refs, simple_name, type_to_source)
from ..values import argument_to_source, values_equal

logger = logging.getLogger(__name__)

INDENT = "    "


@dataclass
class GeneratedFragment:
    function_name: str
    package_name: str
    template: str # Function text with name_ref() placeholders for every type name
    required_imports: Set[str] = field(default_factory=set)
    parameter_signature: str = "" # Rendered parameter list, used to spot clashing overloads
    referenced_names: Set[str] = field(default_factory=set) # Every type named in the template, implicit ones included

    def render(self, qualified=()):
        """Function text, writing the names in `qualified` in full."""
        return resolve_name_refs(self.template, qualified)

    @property
    def function_text(self):
        return self.render()


def filter_annotation_arguments(annotation: Annotation, resolver) -> List[ValueArgument]:
    """Drops arguments whose value equals the declared default of the annotation type."""
    defaults = resolver.default_arguments(annotation)
    kept = []
    for arg in annotation.arguments:
        if arg.name is None or arg.name not in defaults:
            kept.append(arg)
        elif not values_equal(arg.value, defaults[arg.name]):
            kept.append(arg)
    return kept


def render_annotation(annotation: Annotation, arguments, imports: Set[str], resolver):
    """'@Name(arg = value, ...)', adding every referenced type to `imports`."""
    declaration = resolver.resolve_annotation_type(annotation)
    type_name = declaration.qualified_name if declaration is not None else annotation.type_name
    if type_name:
        imports.add(type_name)
        name = name_ref(type_name)
    else:
        name = annotation.short_name
    if not arguments:
        return f"@{name}"
    rendered = ", ".join(argument_to_source(arg.name, arg.value, imports, name_ref) for arg in arguments)
    return f"@{name}({rendered})"


def provider_arguments(annotation: Annotation) -> List[ValueArgument]:
    """The provider argument of a provider annotation, named whether or not it was written positionally."""
    for index, arg in enumerate(annotation.arguments):
        if arg.name == PROVIDER_ARGUMENT:
            return [arg]
        if arg.name is None and index == 0:
            return [ValueArgument(PROVIDER_ARGUMENT, arg.value)]
    return []


def _is_provider_annotation(annotation, resolver, config):
    declaration = resolver.resolve_annotation_type(annotation)
    if declaration is not None:
        return declaration.qualified_name == config.preview_parameter
    return annotation.short_name == simple_name(config.preview_parameter)


def find_provider_parameter(function, resolver, config) -> Optional[Tuple[Parameter, Annotation]]:
    """First parameter carrying the provider annotation, with that annotation."""
    found = []
    for param in function.parameters:
        for annotation in param.annotations:
            if _is_provider_annotation(annotation, resolver, config):
                found.append((param, annotation))
                break
    if len(found) > 1:
        ignored = ", ".join(p.name for p, _ in found[1:])
        logger.warning(f"{function.qualified_name}: only the first provider parameter is forwarded; ignoring {ignored}.")
    return found[0] if found else None


def synthesize(eligible, resolver, config) -> GeneratedFragment:
    function = eligible.function
    test_name = f"{function.simple_name}{config.suffix}"
    imports: Set[str] = set()

    lines = []
    for marker in eligible.markers:
        lines.append(render_annotation(marker, filter_annotation_arguments(marker, resolver), imports, resolver))
    for fixed in (config.preview_test, config.composable):
        lines.append(f"@{name_ref(fixed)}")
        imports.add(fixed)

    parameter_signature = ""
    call_arguments = ""
    provider = find_provider_parameter(function, resolver, config)
    if provider is not None:
        param, annotation = provider
        annotation_text = render_annotation(annotation, provider_arguments(annotation), imports, resolver)
        collect_type_imports(param.type, imports)
        param_name = escape_identifier(param.name)
        parameter_signature = f"{annotation_text} {param_name}: {type_to_source(param.type, name_ref)}"
        # Positional only when it binds to the first parameter
        if function.parameters[0] is param:
            call_arguments = param_name
        else:
            call_arguments = f"{param_name} = {param_name}"

    forwarded = provider[0] if provider is not None else None
    for param in function.parameters:
        if param is not forwarded and param.default is None:
            logger.warning(f"{function.qualified_name}: parameter '{param.name}' has no default and is not forwarded.")

    modifier = "internal " if function.is_internal else ""
    lines.append(f"{modifier}fun {escape_identifier(test_name)}({parameter_signature}) {{")
    lines.append(f"{INDENT}{escape_identifier(function.simple_name)}({call_arguments})")
    lines.append("}")

    return GeneratedFragment(
        function_name=test_name,
        package_name=function.package_name,
        template="\n".join(lines),
        required_imports={name for name in imports if not is_implicit_import(name)},
        parameter_signature=parameter_signature,
        referenced_names=imports,
    )
