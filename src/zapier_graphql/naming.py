import inflect
from caseconverter import kebabcase, titlecase

_inflect_engine = inflect.engine()


def humanize(name: str) -> str:
    """Turn a schema name into a display label, e.g. ``user_full_name`` -> ``User Full Name``."""
    return str(titlecase(name))


def pluralize(noun: str) -> str:
    plural = _inflect_engine.plural_noun(noun)
    return str(plural) if plural else noun


def module_file_name(operation: str) -> str:
    """Dasherized file name of the generated module for an operation."""
    return f"{kebabcase(operation)}.js"


def spec_file_name(operation: str) -> str:
    """File name of the generated test module for an operation."""
    return f"{kebabcase(operation)}.test.js"
